import pytest

from arena.session.manager import SessionManager


@pytest.fixture
def manager():
    return SessionManager(seed=2024)
