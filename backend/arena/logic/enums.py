"""
String enum definitions for arena game concepts.
"""

from enum import StrEnum


class GameType(StrEnum):
    """Games a session can be created for."""

    DICE = "dice"
    RPS = "rps"


class RpsMove(StrEnum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class RoundResult(StrEnum):
    """Outcome of a round from one side's perspective."""

    WIN = "win"
    LOSE = "lose"
    TIE = "tie"


class SessionStatus(StrEnum):
    ACTIVE = "active"
    ENDED = "ended"


class LeaveReason(StrEnum):
    """Why a side stopped participating in a session."""

    LEFT = "left"
    DISCONNECTED = "disconnected"
    TIMEOUT = "timeout"
