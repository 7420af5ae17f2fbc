"""
Round resolution rules.

A rule turns the two pending moves of a round into a RoundOutcome: the
result from each side's perspective, the score delta each side earns and
the value shown to clients as that side's move. Rules are pure apart from
the RNG they are handed, and are looked up by game type so new games only
need a new RoundRule registered in _RULES.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from arena.logic.enums import GameType, RoundResult, RpsMove
from arena.logic.exceptions import InvalidGameTypeError, InvalidMoveError
from arena.logic.rng import roll_die

if TYPE_CHECKING:
    import random

DICE_WIN_POINTS = 10
RPS_WIN_POINTS = 15

_RPS_MOVES = frozenset(m.value for m in RpsMove)

# move -> the move it beats
_RPS_BEATS: dict[RpsMove, RpsMove] = {
    RpsMove.ROCK: RpsMove.SCISSORS,
    RpsMove.SCISSORS: RpsMove.PAPER,
    RpsMove.PAPER: RpsMove.ROCK,
}


@dataclass(frozen=True)
class SideOutcome:
    result: RoundResult
    score_delta: int
    display: str | int


@dataclass(frozen=True)
class RoundOutcome:
    side_a: SideOutcome
    side_b: SideOutcome

    @property
    def is_tie(self) -> bool:
        return self.side_a.result == RoundResult.TIE


def _decide(
    a_wins: bool | None,
    points: int,
    display_a: str | int,
    display_b: str | int,
) -> RoundOutcome:
    """Build an outcome where a_wins is True/False for a decisive round and None for a tie."""
    if a_wins is None:
        return RoundOutcome(
            side_a=SideOutcome(RoundResult.TIE, 0, display_a),
            side_b=SideOutcome(RoundResult.TIE, 0, display_b),
        )
    winner_a = SideOutcome(RoundResult.WIN, points, display_a)
    loser_a = SideOutcome(RoundResult.LOSE, 0, display_a)
    winner_b = SideOutcome(RoundResult.WIN, points, display_b)
    loser_b = SideOutcome(RoundResult.LOSE, 0, display_b)
    if a_wins:
        return RoundOutcome(side_a=winner_a, side_b=loser_b)
    return RoundOutcome(side_a=loser_a, side_b=winner_b)


class RoundRule(ABC):
    game_type: GameType
    win_points: int

    @abstractmethod
    def validate_move(self, move: str) -> str:
        """Return the move to record, or raise InvalidMoveError."""
        ...

    @abstractmethod
    def resolve(self, move_a: str, move_b: str, rng: random.Random) -> RoundOutcome: ...


class DiceRule(RoundRule):
    """Both sides roll one die; the submitted move is only a ready signal."""

    game_type = GameType.DICE
    win_points = DICE_WIN_POINTS

    def validate_move(self, move: str) -> str:
        if not move:
            raise InvalidMoveError(move, "empty move")
        return move

    def resolve(self, move_a: str, move_b: str, rng: random.Random) -> RoundOutcome:  # noqa: ARG002
        roll_a = roll_die(rng)
        roll_b = roll_die(rng)
        a_wins = None if roll_a == roll_b else roll_a > roll_b
        return _decide(a_wins, self.win_points, roll_a, roll_b)


class RockPaperScissorsRule(RoundRule):
    game_type = GameType.RPS
    win_points = RPS_WIN_POINTS

    def validate_move(self, move: str) -> str:
        if move not in _RPS_MOVES:
            raise InvalidMoveError(move, "expected rock, paper or scissors")
        return move

    def resolve(self, move_a: str, move_b: str, rng: random.Random) -> RoundOutcome:  # noqa: ARG002
        a = RpsMove(move_a)
        b = RpsMove(move_b)
        a_wins = None if a == b else _RPS_BEATS[a] == b
        return _decide(a_wins, self.win_points, a.value, b.value)


_RULES: dict[GameType, RoundRule] = {
    GameType.DICE: DiceRule(),
    GameType.RPS: RockPaperScissorsRule(),
}


def parse_game_type(value: str) -> GameType:
    """Map a client-supplied game type string onto GameType."""
    try:
        return GameType(value)
    except ValueError:
        raise InvalidGameTypeError(value) from None


def get_rule(game_type: GameType) -> RoundRule:
    return _RULES[game_type]


def resolve_round(game_type: GameType, move_a: str, move_b: str, rng: random.Random) -> RoundOutcome:
    """Resolve one round once both sides have submitted a move."""
    return get_rule(game_type).resolve(move_a, move_b, rng)
