from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from arena.logic.ai_player import AI_CONNECTION_ID, AI_PLAYER_NAME, generate_move
from arena.logic.enums import GameType, LeaveReason, RoundResult
from arena.logic.exceptions import AlreadyInSessionError, NotAParticipantError
from arena.logic.leaderboard import Leaderboard, LeaderboardEntry
from arena.logic.matchmaker import MatchmakingQueues
from arena.logic.resolver import get_rule, parse_game_type, resolve_round
from arena.messaging.types import (
    GameStartMessage,
    LeaderboardMessage,
    LeftGameMessage,
    LeftQueueMessage,
    OpponentLeftMessage,
    OpponentMovedMessage,
    PongMessage,
    QueuedMessage,
    RegisteredMessage,
    RoundResultMessage,
    RoundScores,
    SideView,
    WaitingMessage,
)
from arena.session.broadcast import Outbox, deliver
from arena.session.models import SideState
from arena.session.registry import PlayerRegistry
from arena.session.session_store import SessionStore
from arena.session.timer_manager import RoundTimerManager

if TYPE_CHECKING:
    from arena.logic.resolver import RoundOutcome
    from arena.messaging.protocol import ConnectionProtocol
    from arena.session.models import GameSession, PlayerRecord

logger = structlog.get_logger()

DEFAULT_LEADERBOARD_SIZE = 10

_LEAVE_MESSAGES = {
    LeaveReason.LEFT: "Your opponent left the game",
    LeaveReason.DISCONNECTED: "Your opponent disconnected",
    LeaveReason.TIMEOUT: "Your opponent ran out of time",
}


class SessionManager:
    """Own all arena state and run every player command against it.

    Each command validates first, mutates synchronously, and queues its
    notifications in an Outbox that is delivered only once the mutation is
    complete.
    """

    def __init__(
        self,
        *,
        leaderboard_size: int = DEFAULT_LEADERBOARD_SIZE,
        round_timeout_seconds: float = 0,
        seed: int | None = None,
    ) -> None:
        self._connections: dict[str, ConnectionProtocol] = {}
        self._leaderboard = Leaderboard()
        self._registry = PlayerRegistry(self._leaderboard)
        self._queues = MatchmakingQueues()
        self._sessions = SessionStore(seed=seed)
        self._timers = RoundTimerManager(round_timeout_seconds, on_timeout=self._handle_round_timeout)
        self._leaderboard_size = leaderboard_size

    def register_connection(self, connection: ConnectionProtocol) -> None:
        self._connections[connection.connection_id] = connection

    def unregister_connection(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)

    def get_player(self, connection_id: str) -> PlayerRecord | None:
        return self._registry.lookup(connection_id)

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get_session(session_id)

    @property
    def timers(self) -> RoundTimerManager:
        return self._timers

    def top_players(self, limit: int | None = None) -> list[LeaderboardEntry]:
        return self._leaderboard.top(self._leaderboard_size if limit is None else limit)

    def stats(self) -> dict[str, Any]:
        return {
            "online": self._registry.count,
            "games": self._sessions.active_count,
            "queues": self._queues.depths(),
        }

    async def _deliver(self, outbox: Outbox) -> None:
        await deliver(outbox, self._connections)

    async def register(self, connection_id: str, name: str | None = None) -> None:
        player = self._registry.register(connection_id, name)
        logger.info("player registered", player_name=player.name)
        outbox = Outbox()
        outbox.send(
            connection_id,
            RegisteredMessage(player_id=connection_id, name=player.name, leaderboard=self.top_players()),
        )
        await self._deliver(outbox)

    async def join_queue(self, connection_id: str, game_type: str) -> None:
        """Enqueue the player and start a session as soon as two are waiting."""
        player = self._registry.require(connection_id)
        parsed = parse_game_type(game_type)
        self._ensure_not_playing(player)
        position = self._queues.enqueue(connection_id, parsed)
        logger.info("player queued", game_type=parsed.value, position=position)

        outbox = Outbox()
        outbox.send(connection_id, QueuedMessage(game_type=parsed, position=position))
        pair = self._queues.dequeue_pair_if_ready(parsed)
        if pair is not None:
            first, second = (self._registry.require(cid) for cid in pair)
            session = self._sessions.create_session(
                parsed,
                SideState(connection_id=first.connection_id, name=first.name),
                SideState(connection_id=second.connection_id, name=second.name),
            )
            self._seat(first, session)
            self._seat(second, session)
            self._announce_start(session, outbox)
        await self._deliver(outbox)

    async def leave_queue(self, connection_id: str, game_type: str) -> None:
        self._registry.require(connection_id)
        parsed = parse_game_type(game_type)
        self._queues.leave(connection_id, parsed)
        outbox = Outbox()
        outbox.send(connection_id, LeftQueueMessage(game_type=parsed))
        await self._deliver(outbox)

    async def play_ai(self, connection_id: str, game_type: str) -> None:
        """Start a session against the AI without queueing."""
        player = self._registry.require(connection_id)
        parsed = parse_game_type(game_type)
        self._ensure_not_playing(player)
        session = self._sessions.create_session(
            parsed,
            SideState(connection_id=player.connection_id, name=player.name),
            SideState(connection_id=AI_CONNECTION_ID, name=AI_PLAYER_NAME, is_ai=True),
        )
        self._seat(player, session)
        outbox = Outbox()
        self._announce_start(session, outbox)
        await self._deliver(outbox)

    def _ensure_not_playing(self, player: PlayerRecord) -> None:
        if player.session_id is None:
            return
        session = self._sessions.get_session(player.session_id)
        if session is not None and session.is_active:
            raise AlreadyInSessionError(session.session_id)

    def _seat(self, player: PlayerRecord, session: GameSession) -> None:
        """Bind a player to a new session, releasing any ended one it still references."""
        previous = player.session_id
        player.session_id = session.session_id
        structlog.contextvars.bind_contextvars(game_id=session.session_id)
        self._queues.purge_all(player.connection_id)
        if previous is not None:
            self._drop_if_unreferenced(previous)

    def _announce_start(self, session: GameSession, outbox: Outbox) -> None:
        logger.info(
            "game started",
            game_type=session.game_type.value,
            side_a=session.side_a.name,
            side_b=session.side_b.name,
        )
        for side in session.human_sides:
            opponent = session.opponent_of(side)
            outbox.send(
                side.connection_id,
                GameStartMessage(
                    game_id=session.session_id,
                    game_type=session.game_type,
                    you=SideView(name=side.name, score=side.score),
                    opponent=SideView(name=opponent.name, score=opponent.score, is_ai=opponent.is_ai),
                ),
            )

    async def submit_move(self, connection_id: str, session_id: str, move: str) -> None:
        """Record a move and resolve the round once both sides have one."""
        self._registry.require(connection_id)
        session = self._sessions.require_active(session_id)
        side = session.side_for(connection_id)
        if side is None:
            raise NotAParticipantError(session_id)
        side.move = get_rule(session.game_type).validate_move(move)
        structlog.contextvars.bind_contextvars(game_id=session_id)

        opponent = session.opponent_of(side)
        if opponent.is_ai:
            opponent.move = generate_move(session.game_type, session.rng)

        outbox = Outbox()
        if session.both_moved:
            self._resolve_round(session, outbox)
        else:
            outbox.send(connection_id, WaitingMessage())
            outbox.send(opponent.connection_id, OpponentMovedMessage())
            if not self._timers.has_timer(session_id):
                self._timers.start(session_id, session.round_number)
        await self._deliver(outbox)

    def _resolve_round(self, session: GameSession, outbox: Outbox) -> None:
        self._timers.cancel(session.session_id)
        round_number = session.round_number
        moves = (session.side_a.move or "", session.side_b.move or "")
        outcome = resolve_round(session.game_type, moves[0], moves[1], session.rng)
        session.apply_outcome(outcome)
        if not outcome.is_tie and not session.is_ai_game:
            self._leaderboard.record_outcome(session.side_a.connection_id, won=outcome.side_a.result == RoundResult.WIN)
            self._leaderboard.record_outcome(session.side_b.connection_id, won=outcome.side_b.result == RoundResult.WIN)
        logger.info(
            "round resolved",
            round=round_number,
            result=outcome.side_a.result.value,
            score_a=session.side_a.score,
            score_b=session.side_b.score,
        )
        self._send_round_result(session, round_number, outcome, outbox)

    @staticmethod
    def _send_round_result(session: GameSession, round_number: int, outcome: RoundOutcome, outbox: Outbox) -> None:
        views = ((session.side_a, outcome.side_a, outcome.side_b), (session.side_b, outcome.side_b, outcome.side_a))
        for side, own, other in views:
            if side.is_ai:
                continue
            opponent = session.opponent_of(side)
            outbox.send(
                side.connection_id,
                RoundResultMessage(
                    round=round_number,
                    your_move=own.display,
                    opponent_move=other.display,
                    result=own.result,
                    scores=RoundScores(you=side.score, opponent=opponent.score),
                ),
            )

    async def leave_session(self, connection_id: str) -> None:
        player = self._registry.require(connection_id)
        outbox = Outbox()
        self._leave_session(player, LeaveReason.LEFT, outbox)
        await self._deliver(outbox)

    def _leave_session(
        self,
        player: PlayerRecord,
        reason: LeaveReason,
        outbox: Outbox,
        *,
        notify_player: bool = True,
    ) -> None:
        session_id = player.session_id
        if session_id is None:
            return
        player.session_id = None
        structlog.contextvars.unbind_contextvars("game_id")
        session = self._sessions.get_session(session_id)
        if session is not None and session.is_active:
            self._forfeit(session, player.connection_id, reason, outbox)
        if notify_player:
            outbox.send(player.connection_id, LeftGameMessage())
        self._drop_if_unreferenced(session_id)

    def _forfeit(self, session: GameSession, leaver_id: str, reason: LeaveReason, outbox: Outbox) -> None:
        """End an active session, crediting the remaining side with a win."""
        self._timers.cancel(session.session_id)
        session.end()
        leaver = session.side_for(leaver_id)
        if leaver is None:
            return
        opponent = session.opponent_of(leaver)
        logger.info("game forfeited", game_id=session.session_id, leaver=leaver.name, reason=reason.value)
        if opponent.is_ai:
            return
        self._leaderboard.record_outcome(opponent.connection_id, won=True)
        self._leaderboard.record_outcome(leaver.connection_id, won=False)
        outbox.send(opponent.connection_id, OpponentLeftMessage(reason=reason, message=_LEAVE_MESSAGES[reason]))

    def _drop_if_unreferenced(self, session_id: str) -> None:
        session = self._sessions.get_session(session_id)
        if session is None or session.is_active or self._registry.is_bound_to(session_id):
            return
        self._timers.cancel(session_id)
        self._sessions.remove_session(session_id)
        logger.debug("game removed", game_id=session_id)

    async def handle_disconnect(self, connection_id: str) -> None:
        """Forfeit any active session, purge queues and forget the player."""
        self.unregister_connection(connection_id)
        player = self._registry.lookup(connection_id)
        if player is None:
            return
        outbox = Outbox()
        self._queues.purge_all(connection_id)
        self._leave_session(player, LeaveReason.DISCONNECTED, outbox, notify_player=False)
        self._registry.remove(connection_id)
        logger.info("player disconnected", player_name=player.name)
        await self._deliver(outbox)

    async def _handle_round_timeout(self, session_id: str, round_number: int) -> None:
        session = self._sessions.get_session(session_id)
        if session is None or not session.is_active or session.round_number != round_number:
            return
        idle = next((side for side in session.human_sides if not side.has_moved), None)
        if idle is None:
            return
        structlog.contextvars.bind_contextvars(game_id=session_id)
        logger.info("round timed out", round=round_number, idle_player=idle.name)
        outbox = Outbox()
        player = self._registry.lookup(idle.connection_id)
        if player is not None and player.session_id == session_id:
            self._leave_session(player, LeaveReason.TIMEOUT, outbox)
        else:
            self._forfeit(session, idle.connection_id, LeaveReason.TIMEOUT, outbox)
        await self._deliver(outbox)

    async def send_leaderboard(self, connection_id: str) -> None:
        outbox = Outbox()
        outbox.send(connection_id, LeaderboardMessage(players=self.top_players()))
        await self._deliver(outbox)

    async def handle_ping(self, connection_id: str) -> None:
        outbox = Outbox()
        outbox.send(connection_id, PongMessage())
        await self._deliver(outbox)
