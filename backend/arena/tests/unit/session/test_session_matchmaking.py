import pytest

from arena.logic.ai_player import AI_PLAYER_NAME
from arena.logic.exceptions import (
    AlreadyInSessionError,
    AlreadyQueuedError,
    InvalidGameTypeError,
    UnknownPlayerError,
)
from arena.messaging.types import SessionMessageType
from arena.tests.unit.session.helpers import connect_player, start_ai_session, start_pvp_session


class TestJoinQueue:
    async def test_second_joiner_starts_session_for_both(self, manager):
        alice = await connect_player(manager, "Alice")
        bob = await connect_player(manager, "Bob")

        await manager.join_queue(alice.connection_id, "rps")
        assert alice.sent_messages == [{"type": "queued", "game_type": "rps", "position": 1}]

        await manager.join_queue(bob.connection_id, "rps")
        assert bob.messages_of_type(SessionMessageType.QUEUED)[0]["position"] == 2

        alice_start = alice.messages_of_type(SessionMessageType.GAME_START)[0]
        bob_start = bob.messages_of_type(SessionMessageType.GAME_START)[0]
        assert alice_start["game_id"] == bob_start["game_id"]
        assert alice_start["game_type"] == "rps"
        assert alice_start["you"] == {"name": "Alice", "score": 0, "is_ai": False}
        assert alice_start["opponent"] == {"name": "Bob", "score": 0, "is_ai": False}
        assert bob_start["you"]["name"] == "Bob"
        assert bob_start["opponent"]["name"] == "Alice"

        session = manager.get_session(alice_start["game_id"])
        assert session.round_number == 1
        assert session.is_active
        assert manager.stats()["queues"]["rps"] == 0

    async def test_different_game_types_do_not_pair(self, manager):
        alice = await connect_player(manager, "Alice")
        bob = await connect_player(manager, "Bob")

        await manager.join_queue(alice.connection_id, "rps")
        await manager.join_queue(bob.connection_id, "dice")

        assert manager.get_player(alice.connection_id).session_id is None
        assert manager.stats()["queues"] == {"dice": 1, "rps": 1}

    async def test_duplicate_join_rejected(self, manager):
        alice = await connect_player(manager, "Alice")
        await manager.join_queue(alice.connection_id, "dice")

        with pytest.raises(AlreadyQueuedError):
            await manager.join_queue(alice.connection_id, "dice")

    async def test_invalid_game_type_rejected(self, manager):
        alice = await connect_player(manager, "Alice")

        with pytest.raises(InvalidGameTypeError):
            await manager.join_queue(alice.connection_id, "chess")
        assert alice.sent_messages == []

    async def test_unregistered_connection_rejected(self, manager):
        with pytest.raises(UnknownPlayerError):
            await manager.join_queue("ghost", "dice")

    async def test_session_start_purges_other_queues(self, manager):
        alice = await connect_player(manager, "Alice")
        bob = await connect_player(manager, "Bob")
        await manager.join_queue(alice.connection_id, "dice")
        await manager.join_queue(alice.connection_id, "rps")

        await manager.join_queue(bob.connection_id, "rps")

        assert manager.stats()["queues"] == {"dice": 0, "rps": 0}

    async def test_cannot_queue_while_session_active(self, manager):
        alice, _bob, _session = await start_pvp_session(manager)

        with pytest.raises(AlreadyInSessionError):
            await manager.join_queue(alice.connection_id, "dice")
        assert manager.stats()["queues"]["dice"] == 0

    async def test_can_queue_again_after_opponent_left(self, manager):
        alice, bob, session = await start_pvp_session(manager)
        await manager.leave_session(alice.connection_id)

        await manager.join_queue(bob.connection_id, "rps")

        assert manager.stats()["queues"]["rps"] == 1
        assert manager.get_session(session.session_id) is not None

    async def test_ended_session_released_when_rebound(self, manager):
        alice, bob, session = await start_pvp_session(manager)
        await manager.leave_session(alice.connection_id)
        carol = await connect_player(manager, "Carol")

        await manager.join_queue(bob.connection_id, "dice")
        await manager.join_queue(carol.connection_id, "dice")

        assert manager.get_session(session.session_id) is None
        assert manager.get_player(bob.connection_id).session_id != session.session_id


class TestLeaveQueue:
    async def test_leave_removes_from_queue(self, manager):
        alice = await connect_player(manager, "Alice")
        await manager.join_queue(alice.connection_id, "dice")
        alice.clear()

        await manager.leave_queue(alice.connection_id, "dice")

        assert alice.sent_messages == [{"type": "left_queue", "game_type": "dice"}]
        assert manager.stats()["queues"]["dice"] == 0

    async def test_leave_never_joined_queue_succeeds(self, manager):
        alice = await connect_player(manager, "Alice")

        await manager.leave_queue(alice.connection_id, "rps")

        assert alice.messages_of_type(SessionMessageType.LEFT_QUEUE) == [{"type": "left_queue", "game_type": "rps"}]
        assert alice.messages_of_type(SessionMessageType.ERROR) == []

    async def test_leave_invalid_game_type_rejected(self, manager):
        alice = await connect_player(manager, "Alice")

        with pytest.raises(InvalidGameTypeError):
            await manager.leave_queue(alice.connection_id, "poker")


class TestPlayAI:
    async def test_starts_session_against_ai(self, manager):
        alice = await connect_player(manager, "Alice")

        await manager.play_ai(alice.connection_id, "dice")

        start = alice.messages_of_type(SessionMessageType.GAME_START)[0]
        assert start["game_type"] == "dice"
        assert start["opponent"] == {"name": AI_PLAYER_NAME, "score": 0, "is_ai": True}
        assert manager.stats()["games"] == 1

    async def test_play_ai_leaves_queues(self, manager):
        alice = await connect_player(manager, "Alice")
        await manager.join_queue(alice.connection_id, "rps")

        await manager.play_ai(alice.connection_id, "rps")

        assert manager.stats()["queues"]["rps"] == 0

    async def test_play_ai_while_playing_rejected(self, manager):
        alice, session = await start_ai_session(manager)

        with pytest.raises(AlreadyInSessionError):
            await manager.play_ai(alice.connection_id, "dice")
        assert manager.get_player(alice.connection_id).session_id == session.session_id

    async def test_play_ai_invalid_game_type(self, manager):
        alice = await connect_player(manager, "Alice")

        with pytest.raises(InvalidGameTypeError):
            await manager.play_ai(alice.connection_id, "go")
        assert manager.stats()["games"] == 0


class TestRegistration:
    async def test_register_default_name(self, manager):
        alice = await connect_player(manager)
        player = manager.get_player(alice.connection_id)
        assert player.name == f"Player_{alice.connection_id[:4]}"

    async def test_stats_counts_online_players(self, manager):
        await connect_player(manager, "Alice")
        await connect_player(manager, "Bob")

        assert manager.stats() == {"online": 2, "games": 0, "queues": {"dice": 0, "rps": 0}}
