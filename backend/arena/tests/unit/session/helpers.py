from __future__ import annotations

from typing import TYPE_CHECKING

from arena.tests.mocks import MockConnection

if TYPE_CHECKING:
    from arena.session.manager import SessionManager
    from arena.session.models import GameSession


async def connect_player(manager: SessionManager, name: str | None = None) -> MockConnection:
    """Attach a mock connection, register it, and clear the registration reply."""
    conn = MockConnection()
    manager.register_connection(conn)
    await manager.register(conn.connection_id, name)
    conn.clear()
    return conn


async def start_pvp_session(
    manager: SessionManager,
    game_type: str = "rps",
    names: tuple[str, str] = ("Alice", "Bob"),
) -> tuple[MockConnection, MockConnection, GameSession]:
    """Queue two players for the same game type so they get paired."""
    first = await connect_player(manager, names[0])
    second = await connect_player(manager, names[1])
    await manager.join_queue(first.connection_id, game_type)
    await manager.join_queue(second.connection_id, game_type)
    session_id = manager.get_player(first.connection_id).session_id
    first.clear()
    second.clear()
    return first, second, manager.get_session(session_id)


async def start_ai_session(
    manager: SessionManager,
    game_type: str = "rps",
    name: str = "Alice",
) -> tuple[MockConnection, GameSession]:
    conn = await connect_player(manager, name)
    await manager.play_ai(conn.connection_id, game_type)
    session_id = manager.get_player(conn.connection_id).session_id
    conn.clear()
    return conn, manager.get_session(session_id)
