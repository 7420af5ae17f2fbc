"""Tests for per-game-type FIFO matchmaking queues."""

import pytest

from arena.logic.enums import GameType
from arena.logic.exceptions import AlreadyQueuedError, InvalidGameTypeError
from arena.logic.matchmaker import MatchmakingQueues


@pytest.fixture
def queues():
    return MatchmakingQueues()


class TestEnqueue:
    def test_returns_one_based_position(self, queues):
        assert queues.enqueue("a", "dice") == 1
        assert queues.enqueue("b", "dice") == 2

    def test_queues_are_independent_per_game_type(self, queues):
        assert queues.enqueue("a", "dice") == 1
        assert queues.enqueue("a", "rps") == 1
        assert queues.depths() == {"dice": 1, "rps": 1}

    def test_duplicate_enqueue_rejected(self, queues):
        queues.enqueue("a", "rps")
        with pytest.raises(AlreadyQueuedError):
            queues.enqueue("a", "rps")
        assert queues.depths()["rps"] == 1

    def test_invalid_game_type_rejected(self, queues):
        with pytest.raises(InvalidGameTypeError):
            queues.enqueue("a", "chess")
        assert queues.depths() == {"dice": 0, "rps": 0}


class TestDequeuePair:
    def test_no_pair_with_single_waiter(self, queues):
        queues.enqueue("a", "dice")
        assert queues.dequeue_pair_if_ready(GameType.DICE) is None
        assert queues.is_queued("a", GameType.DICE)

    def test_pairs_oldest_two_in_order(self, queues):
        for cid in ("a", "b", "c"):
            queues.enqueue(cid, "dice")

        assert queues.dequeue_pair_if_ready(GameType.DICE) == ("a", "b")
        assert queues.depths()["dice"] == 1
        assert queues.is_queued("c", GameType.DICE)

    def test_empty_queue(self, queues):
        assert queues.dequeue_pair_if_ready(GameType.RPS) is None


class TestLeave:
    def test_leave_removes_connection(self, queues):
        queues.enqueue("a", "rps")
        queues.enqueue("b", "rps")
        queues.leave("a", "rps")
        assert not queues.is_queued("a", GameType.RPS)
        assert queues.enqueue("c", "rps") == 2

    def test_leave_when_not_queued_is_noop(self, queues):
        queues.leave("ghost", "dice")
        assert queues.depths()["dice"] == 0

    def test_leave_invalid_game_type_raises(self, queues):
        with pytest.raises(InvalidGameTypeError):
            queues.leave("a", "poker")

    def test_purge_all_clears_every_queue(self, queues):
        queues.enqueue("a", "dice")
        queues.enqueue("a", "rps")
        queues.enqueue("b", "rps")

        queues.purge_all("a")

        assert queues.depths() == {"dice": 0, "rps": 1}
