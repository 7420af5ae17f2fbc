"""Collect notifications during a command and deliver them afterwards."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel

    from arena.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()


class Outbox:
    """Notifications addressed by connection id.

    Commands mutate shared state first and queue their notifications here;
    nothing is sent until the mutation is complete, so no other command can
    interleave with a half-applied one while a send is awaited.
    """

    def __init__(self) -> None:
        self._pending: list[tuple[str, dict[str, Any]]] = []

    def send(self, connection_id: str, message: BaseModel) -> None:
        self._pending.append((connection_id, message.model_dump(mode="json")))

    @property
    def pending(self) -> list[tuple[str, dict[str, Any]]]:
        return list(self._pending)


async def deliver(outbox: Outbox, connections: Mapping[str, ConnectionProtocol]) -> None:
    """Push queued notifications. Missing or broken connections are skipped.

    Iterate over a snapshot so a disconnect triggered while a send is
    awaited cannot mutate what is being delivered.
    """
    for connection_id, message in outbox.pending:
        connection = connections.get(connection_id)
        if connection is None:
            logger.debug("dropping notification for unknown connection", target=connection_id)
            continue
        with contextlib.suppress(RuntimeError, OSError, ConnectionError):
            await connection.send_message(message)
