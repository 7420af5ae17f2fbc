"""
Matchmaking queues.

One FIFO waiting list per game type. The two oldest waiting connections are
paired as soon as a queue holds two of them; there is no skill-based
matching.
"""

from collections import deque

from arena.logic.enums import GameType
from arena.logic.exceptions import AlreadyQueuedError
from arena.logic.resolver import parse_game_type


class MatchmakingQueues:
    def __init__(self) -> None:
        self._queues: dict[GameType, deque[str]] = {game_type: deque() for game_type in GameType}

    def enqueue(self, connection_id: str, game_type: str) -> int:
        """Append a connection to a game type's queue. Return its 1-based position."""
        queue = self._queues[parse_game_type(game_type)]
        if connection_id in queue:
            raise AlreadyQueuedError(game_type)
        queue.append(connection_id)
        return len(queue)

    def dequeue_pair_if_ready(self, game_type: GameType) -> tuple[str, str] | None:
        """Pop the two front-most connections, oldest first, once at least two are waiting."""
        queue = self._queues[game_type]
        if len(queue) < 2:  # noqa: PLR2004
            return None
        first = queue.popleft()
        second = queue.popleft()
        return first, second

    def leave(self, connection_id: str, game_type: str) -> None:
        """Remove a connection from one queue. Leaving a queue it never joined is a no-op."""
        queue = self._queues[parse_game_type(game_type)]
        if connection_id in queue:
            queue.remove(connection_id)

    def purge_all(self, connection_id: str) -> None:
        for queue in self._queues.values():
            if connection_id in queue:
                queue.remove(connection_id)

    def is_queued(self, connection_id: str, game_type: GameType) -> bool:
        return connection_id in self._queues[game_type]

    def depths(self) -> dict[str, int]:
        return {game_type.value: len(queue) for game_type, queue in self._queues.items()}
