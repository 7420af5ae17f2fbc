import pytest

from arena.messaging.router import MessageRouter
from arena.server.app import create_app
from arena.server.settings import ArenaServerSettings
from arena.session.manager import SessionManager
from arena.tests.mocks import MockConnection


@pytest.fixture
def session_manager():
    return SessionManager(seed=1234)


@pytest.fixture
def message_router(session_manager):
    return MessageRouter(session_manager)


@pytest.fixture
def mock_connection():
    return MockConnection()


@pytest.fixture
def app(session_manager, message_router):
    return create_app(
        settings=ArenaServerSettings(),
        session_manager=session_manager,
        message_router=message_router,
    )
