"""
AI opponent for single-player sessions.

The AI keeps no state between rounds: for dice it only signals that it is
ready (the resolver produces the roll), for rock-paper-scissors it picks a
move uniformly at random.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arena.logic.enums import GameType, RpsMove

if TYPE_CHECKING:
    import random

AI_CONNECTION_ID = "AI"
AI_PLAYER_NAME = "AI Opponent"
DICE_READY_MOVE = "roll"

_RPS_CHOICES = tuple(RpsMove)


def generate_move(game_type: GameType, rng: random.Random) -> str:
    """Return the AI's move for the current round."""
    if game_type == GameType.DICE:
        return DICE_READY_MOVE
    return rng.choice(_RPS_CHOICES).value
