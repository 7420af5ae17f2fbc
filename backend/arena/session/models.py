from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from arena.logic.enums import GameType, SessionStatus
from arena.logic.rng import create_rng

if TYPE_CHECKING:
    import random

    from arena.logic.resolver import RoundOutcome


@dataclass
class PlayerRecord:
    """Represent a registered connection in the session layer.

    Lifecycle:
    - Created on register
    - session_id is set when a game session starts and cleared when the
      player leaves it (or is rebound to a newer session)
    - Removed from the registry on disconnect
    """

    connection_id: str
    name: str
    session_id: str | None = None


@dataclass
class SideState:
    """One participant of a session: a connection or the AI."""

    connection_id: str
    name: str
    is_ai: bool = False
    score: int = 0
    move: str | None = None  # pending move of the current round

    @property
    def has_moved(self) -> bool:
        return bool(self.move)


@dataclass
class GameSession:
    """A live two-sided game.

    side_a/side_b order only reflects who queued first; clients always see
    a "you vs opponent" view built per recipient.
    """

    session_id: str
    game_type: GameType
    side_a: SideState
    side_b: SideState
    status: SessionStatus = SessionStatus.ACTIVE
    round_number: int = 1
    created_at: float = field(default_factory=time.time)
    rng: random.Random = field(default_factory=create_rng, repr=False)

    def __post_init__(self) -> None:
        """Validate the two-sided invariants."""
        if self.side_a.connection_id == self.side_b.connection_id:
            raise ValueError("A session needs two distinct sides")
        if self.side_a.is_ai and self.side_b.is_ai:
            raise ValueError("At most one side may be AI-controlled")

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def is_ai_game(self) -> bool:
        return self.side_a.is_ai or self.side_b.is_ai

    @property
    def sides(self) -> tuple[SideState, SideState]:
        return self.side_a, self.side_b

    @property
    def human_sides(self) -> list[SideState]:
        return [side for side in self.sides if not side.is_ai]

    @property
    def both_moved(self) -> bool:
        return self.side_a.has_moved and self.side_b.has_moved

    def side_for(self, connection_id: str) -> SideState | None:
        for side in self.sides:
            if not side.is_ai and side.connection_id == connection_id:
                return side
        return None

    def opponent_of(self, side: SideState) -> SideState:
        return self.side_b if side is self.side_a else self.side_a

    def apply_outcome(self, outcome: RoundOutcome) -> None:
        """Add score deltas, clear pending moves and advance to the next round."""
        self.side_a.score += outcome.side_a.score_delta
        self.side_b.score += outcome.side_b.score_delta
        self.side_a.move = None
        self.side_b.move = None
        self.round_number += 1

    def end(self) -> None:
        self.status = SessionStatus.ENDED
