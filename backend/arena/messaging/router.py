from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from arena.logic.exceptions import (
    AlreadyInSessionError,
    AlreadyQueuedError,
    ArenaError,
    InvalidGameTypeError,
    InvalidMoveError,
    NotAParticipantError,
    SessionNotActiveError,
    SessionNotFoundError,
    UnknownPlayerError,
)
from arena.messaging.types import (
    ClientMessage,
    ErrorMessage,
    GetLeaderboardMessage,
    JoinQueueMessage,
    LeaveGameMessage,
    LeaveQueueMessage,
    MoveMessage,
    PingMessage,
    PlayAIMessage,
    RegisterMessage,
    SessionErrorCode,
    parse_client_message,
)

if TYPE_CHECKING:
    from arena.messaging.protocol import ConnectionProtocol
    from arena.session.manager import SessionManager

logger = logging.getLogger(__name__)


_ERROR_CODES: dict[type[ArenaError], SessionErrorCode] = {
    AlreadyQueuedError: SessionErrorCode.ALREADY_QUEUED,
    AlreadyInSessionError: SessionErrorCode.ALREADY_IN_GAME,
    InvalidGameTypeError: SessionErrorCode.INVALID_GAME_TYPE,
    SessionNotFoundError: SessionErrorCode.GAME_NOT_FOUND,
    SessionNotActiveError: SessionErrorCode.GAME_ENDED,
    NotAParticipantError: SessionErrorCode.NOT_IN_GAME,
    InvalidMoveError: SessionErrorCode.INVALID_MOVE,
}


def error_code_for(error: ArenaError) -> SessionErrorCode:
    return _ERROR_CODES[type(error)]


class MessageRouter:
    """
    Routes incoming messages to appropriate handlers.

    This class contains pure business logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def handle_message(
        self,
        connection: ConnectionProtocol,
        raw_message: dict[str, Any],
    ) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid message from %s: %s", connection.connection_id, e)
            await connection.send_message(
                ErrorMessage(code=SessionErrorCode.INVALID_MESSAGE, message=str(e)).model_dump(),
            )
            return

        try:
            await self._dispatch(connection.connection_id, message)
        except UnknownPlayerError:
            logger.warning("dropping %s from unregistered connection %s", message.type, connection.connection_id)
        except ArenaError as e:
            logger.info("%s rejected for %s: %s", message.type, connection.connection_id, e)
            await connection.send_message(
                ErrorMessage(code=error_code_for(e), message=str(e)).model_dump(),
            )

    async def _dispatch(self, connection_id: str, message: ClientMessage) -> None:
        manager = self._session_manager
        if isinstance(message, RegisterMessage):
            await manager.register(connection_id, message.name)
        elif isinstance(message, JoinQueueMessage):
            await manager.join_queue(connection_id, message.game_type)
        elif isinstance(message, LeaveQueueMessage):
            await manager.leave_queue(connection_id, message.game_type)
        elif isinstance(message, PlayAIMessage):
            await manager.play_ai(connection_id, message.game_type)
        elif isinstance(message, MoveMessage):
            await manager.submit_move(connection_id, message.game_id, message.move)
        elif isinstance(message, LeaveGameMessage):
            await manager.leave_session(connection_id)
        elif isinstance(message, GetLeaderboardMessage):
            await manager.send_leaderboard(connection_id)
        elif isinstance(message, PingMessage):
            await manager.handle_ping(connection_id)

    async def handle_connect(self, connection: ConnectionProtocol) -> None:
        self._session_manager.register_connection(connection)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._session_manager.handle_disconnect(connection.connection_id)
