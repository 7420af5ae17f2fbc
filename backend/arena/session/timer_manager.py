"""Manage per-session round timeouts for human-vs-human games."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

# Callback type: (session_id, round_number) -> Awaitable[None]
RoundTimeoutCallback = Callable[[str, int], Awaitable[None]]


class RoundTimerManager:
    """Run one timeout task per session while a round waits on a second move.

    A timeout of 0 disables timers entirely. The callback receives the
    round number the timer was armed for, so a stale timer can tell that
    the round it was guarding has already been resolved.
    """

    def __init__(self, timeout_seconds: float, on_timeout: RoundTimeoutCallback) -> None:
        self._timeout_seconds = timeout_seconds
        self._on_timeout = on_timeout
        self._tasks: dict[str, asyncio.Task[None]] = {}  # session_id -> task

    @property
    def enabled(self) -> bool:
        return self._timeout_seconds > 0

    def has_timer(self, session_id: str) -> bool:
        return session_id in self._tasks

    def start(self, session_id: str, round_number: int) -> None:
        """Arm (or re-arm) the timeout for a session's current round."""
        if not self.enabled:
            return
        self.cancel(session_id)
        self._tasks[session_id] = asyncio.create_task(self._run(session_id, round_number))

    def cancel(self, session_id: str) -> None:
        task = self._tasks.pop(session_id, None)
        # The timeout callback runs inside the task; never cancel it from there.
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def cancel_all(self) -> None:
        for session_id in list(self._tasks):
            self.cancel(session_id)

    async def _run(self, session_id: str, round_number: int) -> None:
        try:
            await asyncio.sleep(self._timeout_seconds)
            self._tasks.pop(session_id, None)
            await self._on_timeout(session_id, round_number)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("round timeout callback failed for %s", session_id)
