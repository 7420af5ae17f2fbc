import pytest

from arena.logic.enums import GameType, RoundResult, SessionStatus
from arena.logic.exceptions import SessionNotActiveError, SessionNotFoundError
from arena.logic.resolver import RoundOutcome, SideOutcome
from arena.session.models import GameSession, SideState
from arena.session.session_store import SessionStore


def _sides(ai: bool = False) -> tuple[SideState, SideState]:
    return SideState("a", "Alice"), SideState("b", "Bob", is_ai=ai)


class TestSessionStore:
    def test_create_session_starts_active_at_round_one(self):
        store = SessionStore(seed=1)
        side_a, side_b = _sides()
        side_a.score = 99
        session = store.create_session(GameType.DICE, side_a, side_b)

        assert session.status == SessionStatus.ACTIVE
        assert session.round_number == 1
        assert session.side_a.score == 0
        assert store.get_session(session.session_id) is session

    def test_session_ids_are_unique(self):
        store = SessionStore()
        ids = {store.create_session(GameType.RPS, *_sides()).session_id for _ in range(50)}
        assert len(ids) == 50

    def test_require_active_unknown(self):
        with pytest.raises(SessionNotFoundError):
            SessionStore().require_active("missing")

    def test_require_active_ended(self):
        store = SessionStore()
        session = store.create_session(GameType.RPS, *_sides())
        session.end()

        with pytest.raises(SessionNotActiveError):
            store.require_active(session.session_id)
        assert store.active_count == 0
        assert len(store) == 1

    def test_remove_session(self):
        store = SessionStore()
        session = store.create_session(GameType.RPS, *_sides())
        store.remove_session(session.session_id)
        assert store.get_session(session.session_id) is None


class TestGameSession:
    def test_rejects_same_connection_on_both_sides(self):
        with pytest.raises(ValueError, match="distinct"):
            GameSession("g1", GameType.RPS, SideState("a", "A"), SideState("a", "A"))

    def test_rejects_two_ai_sides(self):
        with pytest.raises(ValueError, match="AI"):
            GameSession("g1", GameType.RPS, SideState("x", "X", is_ai=True), SideState("y", "Y", is_ai=True))

    def test_side_for_ignores_ai(self):
        session = GameSession("g1", GameType.RPS, *_sides(ai=True))
        assert session.side_for("a") is session.side_a
        assert session.side_for("b") is None
        assert session.is_ai_game

    def test_apply_outcome_updates_scores_and_round(self):
        session = GameSession("g1", GameType.RPS, *_sides())
        session.side_a.move = "rock"
        session.side_b.move = "scissors"
        outcome = RoundOutcome(
            side_a=SideOutcome(RoundResult.WIN, 15, "rock"),
            side_b=SideOutcome(RoundResult.LOSE, 0, "scissors"),
        )

        session.apply_outcome(outcome)

        assert (session.side_a.score, session.side_b.score) == (15, 0)
        assert session.side_a.move is None
        assert session.side_b.move is None
        assert session.round_number == 2
