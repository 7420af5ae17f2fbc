from uuid import uuid4

from arena.logic.enums import GameType
from arena.logic.exceptions import SessionNotActiveError, SessionNotFoundError
from arena.logic.rng import create_rng
from arena.session.models import GameSession, SideState

_SESSION_ID_LENGTH = 12


class SessionStore:
    """In-memory store of game sessions keyed by session id.

    Sessions stay in the store after they end so already computed results
    can still be read; the session manager drops them once no player
    references them any more.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._sessions: dict[str, GameSession] = {}  # session_id -> GameSession
        self._seed_rng = create_rng(seed)

    def create_session(self, game_type: GameType, side_a: SideState, side_b: SideState) -> GameSession:
        """Create and register an active session at round 1 with both scores at 0."""
        session_id = uuid4().hex[:_SESSION_ID_LENGTH]
        while session_id in self._sessions:
            session_id = uuid4().hex[:_SESSION_ID_LENGTH]
        side_a.score = side_b.score = 0
        side_a.move = side_b.move = None
        session = GameSession(
            session_id=session_id,
            game_type=game_type,
            side_a=side_a,
            side_b=side_b,
            rng=create_rng(self._seed_rng.getrandbits(64)),
        )
        self._sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def require_active(self, session_id: str) -> GameSession:
        """Return an active session or raise SessionNotFoundError / SessionNotActiveError."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.is_active:
            raise SessionNotActiveError(session_id)
        return session

    def remove_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    @property
    def active_count(self) -> int:
        return sum(1 for session in self._sessions.values() if session.is_active)

    def __len__(self) -> int:
        return len(self._sessions)
