from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from arena.logic.enums import GameType, LeaveReason, RoundResult
from arena.logic.leaderboard import LeaderboardEntry

# ASCII control character boundaries for input validation
_SPACE_ORD = 0x20
_DEL_ORD = 0x7F


class ClientMessageType(StrEnum):
    REGISTER = "register"
    JOIN_QUEUE = "join_queue"
    LEAVE_QUEUE = "leave_queue"
    PLAY_AI = "play_ai"
    MOVE = "move"
    LEAVE_GAME = "leave_game"
    GET_LEADERBOARD = "get_leaderboard"
    PING = "ping"


class SessionMessageType(StrEnum):
    REGISTERED = "registered"
    QUEUED = "queued"
    LEFT_QUEUE = "left_queue"
    GAME_START = "game_start"
    WAITING = "waiting"
    OPPONENT_MOVED = "opponent_moved"
    ROUND_RESULT = "round_result"
    OPPONENT_LEFT = "opponent_left"
    LEFT_GAME = "left_game"
    LEADERBOARD = "leaderboard"
    ERROR = "session_error"
    PONG = "pong"


class SessionErrorCode(StrEnum):
    ALREADY_QUEUED = "already_queued"
    ALREADY_IN_GAME = "already_in_game"
    INVALID_GAME_TYPE = "invalid_game_type"
    GAME_NOT_FOUND = "game_not_found"
    GAME_ENDED = "game_ended"
    NOT_IN_GAME = "not_in_game"
    INVALID_MOVE = "invalid_move"
    INVALID_MESSAGE = "invalid_message"
    RATE_LIMITED = "rate_limited"


# game_type stays a plain string here so an unknown value reaches the domain
# and is reported as invalid_game_type rather than a schema error.
_GAME_TYPE_FIELD = Field(min_length=1, max_length=20)


class RegisterMessage(BaseModel):
    type: Literal[ClientMessageType.REGISTER] = ClientMessageType.REGISTER
    name: str | None = Field(default=None, max_length=200)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str | None) -> str | None:
        if v is not None and any(ord(c) < _SPACE_ORD or ord(c) == _DEL_ORD for c in v):
            raise ValueError("name must not contain control characters")
        return v


class JoinQueueMessage(BaseModel):
    type: Literal[ClientMessageType.JOIN_QUEUE] = ClientMessageType.JOIN_QUEUE
    game_type: str = _GAME_TYPE_FIELD


class LeaveQueueMessage(BaseModel):
    type: Literal[ClientMessageType.LEAVE_QUEUE] = ClientMessageType.LEAVE_QUEUE
    game_type: str = _GAME_TYPE_FIELD


class PlayAIMessage(BaseModel):
    type: Literal[ClientMessageType.PLAY_AI] = ClientMessageType.PLAY_AI
    game_type: str = _GAME_TYPE_FIELD


class MoveMessage(BaseModel):
    type: Literal[ClientMessageType.MOVE] = ClientMessageType.MOVE
    game_id: str = Field(min_length=1, max_length=50)
    move: str = Field(min_length=1, max_length=20)


class LeaveGameMessage(BaseModel):
    type: Literal[ClientMessageType.LEAVE_GAME] = ClientMessageType.LEAVE_GAME


class GetLeaderboardMessage(BaseModel):
    type: Literal[ClientMessageType.GET_LEADERBOARD] = ClientMessageType.GET_LEADERBOARD


class PingMessage(BaseModel):
    type: Literal[ClientMessageType.PING] = ClientMessageType.PING


ClientMessage = (
    RegisterMessage
    | JoinQueueMessage
    | LeaveQueueMessage
    | PlayAIMessage
    | MoveMessage
    | LeaveGameMessage
    | GetLeaderboardMessage
    | PingMessage
)


class RegisteredMessage(BaseModel):
    type: Literal[SessionMessageType.REGISTERED] = SessionMessageType.REGISTERED
    player_id: str
    name: str
    leaderboard: list[LeaderboardEntry]


class QueuedMessage(BaseModel):
    type: Literal[SessionMessageType.QUEUED] = SessionMessageType.QUEUED
    game_type: GameType
    position: int


class LeftQueueMessage(BaseModel):
    type: Literal[SessionMessageType.LEFT_QUEUE] = SessionMessageType.LEFT_QUEUE
    game_type: GameType


class SideView(BaseModel):
    """One side of a session as shown to a participant."""

    name: str
    score: int
    is_ai: bool = False


class GameStartMessage(BaseModel):
    """Sent to each human side, framed from that side's point of view."""

    type: Literal[SessionMessageType.GAME_START] = SessionMessageType.GAME_START
    game_id: str
    game_type: GameType
    you: SideView
    opponent: SideView


class WaitingMessage(BaseModel):
    type: Literal[SessionMessageType.WAITING] = SessionMessageType.WAITING
    message: str = "Waiting for opponent..."


class OpponentMovedMessage(BaseModel):
    type: Literal[SessionMessageType.OPPONENT_MOVED] = SessionMessageType.OPPONENT_MOVED
    message: str = "Opponent has made their move!"


class RoundScores(BaseModel):
    you: int
    opponent: int


class RoundResultMessage(BaseModel):
    type: Literal[SessionMessageType.ROUND_RESULT] = SessionMessageType.ROUND_RESULT
    round: int
    your_move: str | int
    opponent_move: str | int
    result: RoundResult
    scores: RoundScores


class OpponentLeftMessage(BaseModel):
    type: Literal[SessionMessageType.OPPONENT_LEFT] = SessionMessageType.OPPONENT_LEFT
    reason: LeaveReason
    message: str


class LeftGameMessage(BaseModel):
    type: Literal[SessionMessageType.LEFT_GAME] = SessionMessageType.LEFT_GAME


class LeaderboardMessage(BaseModel):
    type: Literal[SessionMessageType.LEADERBOARD] = SessionMessageType.LEADERBOARD
    players: list[LeaderboardEntry]


class ErrorMessage(BaseModel):
    type: Literal[SessionMessageType.ERROR] = SessionMessageType.ERROR
    code: SessionErrorCode
    message: str


class PongMessage(BaseModel):
    type: Literal[SessionMessageType.PONG] = SessionMessageType.PONG


_ClientMessage = Annotated[ClientMessage, Field(discriminator="type")]

_client_adapter = TypeAdapter(_ClientMessage)


def parse_client_message(data: dict[str, Any]) -> ClientMessage:
    """Parse a raw dict into a typed ClientMessage."""
    return _client_adapter.validate_python(data)
