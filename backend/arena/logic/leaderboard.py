"""
Process-lifetime leaderboard.

One entry per connection that ever registered. Entries survive disconnects
and are only changed through round and forfeit outcomes.
"""

from pydantic import BaseModel

WIN_SCORE_INCREMENT = 10


class LeaderboardEntry(BaseModel):
    player_id: str
    name: str
    wins: int = 0
    losses: int = 0
    score: int = 0


class Leaderboard:
    def __init__(self) -> None:
        self._entries: dict[str, LeaderboardEntry] = {}  # connection_id -> entry

    def ensure_entry(self, connection_id: str, name: str) -> LeaderboardEntry:
        """Create a zero-stat entry unless one already exists. The name is a registration-time snapshot."""
        entry = self._entries.get(connection_id)
        if entry is None:
            entry = LeaderboardEntry(player_id=connection_id, name=name)
            self._entries[connection_id] = entry
        return entry

    def get(self, connection_id: str) -> LeaderboardEntry | None:
        return self._entries.get(connection_id)

    def record_outcome(self, connection_id: str, *, won: bool) -> None:
        """Credit a win (+1 win, +10 score) or a loss (+1 loss). Unknown ids are ignored."""
        entry = self._entries.get(connection_id)
        if entry is None:
            return
        if won:
            entry.wins += 1
            entry.score += WIN_SCORE_INCREMENT
        else:
            entry.losses += 1

    def top(self, limit: int) -> list[LeaderboardEntry]:
        """Entries by score descending; equal scores keep registration order."""
        ranked = sorted(self._entries.values(), key=lambda e: e.score, reverse=True)
        return ranked[:limit]

    def __len__(self) -> int:
        return len(self._entries)
