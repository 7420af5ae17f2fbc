"""Typed domain exceptions for arena commands.

Every rejected command raises a subclass of ArenaError before any shared
state is touched. The message router converts them into session_error
notifications for the originating connection.
"""


class ArenaError(Exception):
    """Base exception for commands the arena refuses to carry out."""


class UnknownPlayerError(ArenaError):
    """The connection has not registered (or was already removed)."""

    def __init__(self, connection_id: str) -> None:
        self.connection_id = connection_id
        super().__init__(f"unknown player {connection_id}")


class InvalidGameTypeError(ArenaError):
    def __init__(self, game_type: str) -> None:
        self.game_type = game_type
        super().__init__(f"invalid game type: {game_type!r}")


class AlreadyQueuedError(ArenaError):
    def __init__(self, game_type: str) -> None:
        self.game_type = game_type
        super().__init__("Already in queue")


class AlreadyInSessionError(ArenaError):
    """The player is still seated in an active session."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"already playing in game {session_id}")


class SessionNotFoundError(ArenaError):
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"game {session_id} not found")


class SessionNotActiveError(ArenaError):
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"game {session_id} has ended")


class NotAParticipantError(ArenaError):
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"not a participant of game {session_id}")


class InvalidMoveError(ArenaError):
    """Move value is not allowed by the session's round rule."""

    def __init__(self, move: str, reason: str) -> None:
        self.move = move
        self.reason = reason
        super().__init__(f"invalid move {move!r}: {reason}")
