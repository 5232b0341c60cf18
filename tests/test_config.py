"""Unit tests for configuration loading."""
import pytest
from src.config import Config, DEFAULT_ADVISORY_API_URL
from src.errors import ConfigError


class TestConfig:
    """Test cases for Config."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('DATABASE_PATH', '/tmp/advisories.db')
        monkeypatch.setenv('OPERATOR_KEYWORDS', 'Blue Origin, New Glenn ,')
        monkeypatch.setenv('REQUEST_TIMEOUT', '12.5')
        monkeypatch.delenv('ADVISORY_API_URL', raising=False)

        config = Config.from_env()

        assert config.DATABASE_PATH == '/tmp/advisories.db'
        assert config.OPERATOR_KEYWORDS == ['Blue Origin', 'New Glenn']
        assert config.REQUEST_TIMEOUT == 12.5
        assert config.ADVISORY_API_URL == DEFAULT_ADVISORY_API_URL
        assert config.validate() is True

    def test_default_keywords(self):
        assert Config(DATABASE_PATH='x.db').OPERATOR_KEYWORDS == ['Starship', 'SpaceX', 'Starlink']

    def test_database_path_required(self, monkeypatch):
        monkeypatch.delenv('DATABASE_PATH', raising=False)

        with pytest.raises(ConfigError):
            Config.from_env().validate()

    def test_empty_keywords_rejected(self):
        with pytest.raises(ConfigError):
            Config(DATABASE_PATH='x.db', OPERATOR_KEYWORDS=[]).validate()

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv('UPDATE_INTERVAL_SECONDS', 'hourly')

        with pytest.raises(ConfigError):
            Config.from_env()
