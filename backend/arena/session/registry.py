from arena.logic.exceptions import UnknownPlayerError
from arena.logic.leaderboard import Leaderboard
from arena.session.models import PlayerRecord

_DEFAULT_NAME_PREFIX = "Player_"
_DEFAULT_NAME_ID_CHARS = 4
MAX_NAME_LENGTH = 50


def default_player_name(connection_id: str) -> str:
    return f"{_DEFAULT_NAME_PREFIX}{connection_id[:_DEFAULT_NAME_ID_CHARS]}"


class PlayerRegistry:
    """In-memory map of connection ids to player records.

    Registration also guarantees a leaderboard entry for the connection;
    removing a player never touches the leaderboard.
    """

    def __init__(self, leaderboard: Leaderboard) -> None:
        self._players: dict[str, PlayerRecord] = {}  # connection_id -> PlayerRecord
        self._leaderboard = leaderboard

    def register(self, connection_id: str, requested_name: str | None = None) -> PlayerRecord:
        """Register a connection. Re-registering returns the existing record unchanged."""
        player = self._players.get(connection_id)
        if player is not None:
            return player
        name = (requested_name or "").strip()[:MAX_NAME_LENGTH] or default_player_name(connection_id)
        player = PlayerRecord(connection_id=connection_id, name=name)
        self._players[connection_id] = player
        self._leaderboard.ensure_entry(connection_id, name)
        return player

    def lookup(self, connection_id: str) -> PlayerRecord | None:
        return self._players.get(connection_id)

    def require(self, connection_id: str) -> PlayerRecord:
        """Look up a player, raising UnknownPlayerError for unregistered connections."""
        player = self._players.get(connection_id)
        if player is None:
            raise UnknownPlayerError(connection_id)
        return player

    def remove(self, connection_id: str) -> PlayerRecord | None:
        return self._players.pop(connection_id, None)

    def is_bound_to(self, session_id: str) -> bool:
        """Whether any registered player still references the session."""
        return any(p.session_id == session_id for p in self._players.values())

    @property
    def count(self) -> int:
        return len(self._players)
