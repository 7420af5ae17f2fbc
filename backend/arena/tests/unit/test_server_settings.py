import pytest
from pydantic import ValidationError

from arena.server.settings import ArenaServerSettings


class TestArenaServerSettings:
    def test_cors_origins_json_array(self, monkeypatch):
        monkeypatch.setenv("ARENA_CORS_ORIGINS", '["http://a.com","http://b.com"]')
        settings = ArenaServerSettings()
        assert settings.cors_origins == ["http://a.com", "http://b.com"]

    def test_cors_origins_csv(self, monkeypatch):
        monkeypatch.setenv("ARENA_CORS_ORIGINS", "http://a.com,http://b.com")
        settings = ArenaServerSettings()
        assert settings.cors_origins == ["http://a.com", "http://b.com"]

    def test_cors_origins_invalid_raises(self, monkeypatch):
        monkeypatch.setenv("ARENA_CORS_ORIGINS", "")
        with pytest.raises(ValidationError, match="cors_origins"):
            ArenaServerSettings()

    def test_round_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("ARENA_ROUND_TIMEOUT_SECONDS", "30")
        assert ArenaServerSettings().round_timeout_seconds == 30

    def test_round_timeout_negative_rejected(self):
        with pytest.raises(ValidationError, match="round_timeout_seconds"):
            ArenaServerSettings(round_timeout_seconds=-1)

    def test_leaderboard_size_defaults_to_ten(self, monkeypatch):
        monkeypatch.delenv("ARENA_LEADERBOARD_SIZE", raising=False)
        assert ArenaServerSettings().leaderboard_size == 10

    def test_leaderboard_size_zero_rejected(self):
        with pytest.raises(ValidationError, match="leaderboard_size"):
            ArenaServerSettings(leaderboard_size=0)

    def test_log_dir_empty_rejected(self):
        with pytest.raises(ValidationError, match="log_dir"):
            ArenaServerSettings(log_dir="")
