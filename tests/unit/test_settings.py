"""Tests for configuration settings."""
import pytest
import toml

from space_cli.config import Settings, config_path, get_settings, load_settings, save_settings
from space_cli.config.settings import DEFAULT_APIKEY, DEFAULT_ENDPOINT
from space_cli.errors import ConfigError


class TestSettings:
    """Test Settings configuration."""

    def test_default_values(self):
        """Test default values are set correctly."""
        settings = Settings()

        assert settings.endpoint == DEFAULT_ENDPOINT
        assert settings.apikey == DEFAULT_APIKEY
        assert settings.authorization == ""
        assert settings.timeout == 30
        assert settings.bucket == "node-files"
        assert settings.table == "nodes"

    def test_config_path_follows_override(self, isolated_config):
        """Test SPACE_CONFIG_DIR moves the config file."""
        assert config_path() == isolated_config / "space.toml"

    def test_save_and_load(self):
        """Test saved settings load back unchanged."""
        path = save_settings(Settings(authorization="secret"))

        loaded = load_settings(path)

        assert loaded.authorization == "secret"
        assert loaded.endpoint == DEFAULT_ENDPOINT
        assert set(toml.load(path)) == {"apikey", "endpoint", "authorization"}

    def test_missing_apikey_falls_back_to_default(self):
        """Test a file without apikey uses the public key."""
        path = config_path()
        path.parent.mkdir(parents=True)
        path.write_text('endpoint = "https://example.com"\nauthorization = "tok"\n')

        settings = load_settings(path)

        assert settings.apikey == DEFAULT_APIKEY
        assert settings.endpoint == "https://example.com"

    def test_environment_overrides_file(self, monkeypatch):
        """Test SPACE_ variables take precedence over the file."""
        save_settings(Settings(authorization="from-file"))
        monkeypatch.setenv("SPACE_AUTHORIZATION", "from-env")

        assert load_settings().authorization == "from-env"

    def test_missing_token_required(self):
        """Test loading without a token fails when one is required."""
        with pytest.raises(ConfigError, match="space login"):
            load_settings()

    def test_missing_token_optional(self):
        """Test loading without a token succeeds for login."""
        assert load_settings(required=False).authorization == ""

    def test_unreadable_toml(self):
        """Test a malformed config file raises ConfigError."""
        path = config_path()
        path.parent.mkdir(parents=True)
        path.write_text("this is = = not toml")

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_invalid_endpoint(self):
        """Test endpoints must be http or https URLs."""
        path = config_path()
        path.parent.mkdir(parents=True)
        path.write_text('endpoint = "ftp://example.com"\nauthorization = "tok"\n')

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_invalid_timeout(self):
        """Test the timeout must be positive."""
        with pytest.raises(ValueError):
            Settings(timeout=0)

    def test_get_settings_is_cached(self):
        """Test get_settings returns one instance until reset."""
        save_settings(Settings(authorization="tok"))

        assert get_settings() is get_settings()

    def test_login_defaults(self):
        """Test login prefill values come from the loaded settings."""
        assert Settings(authorization="abc").login_defaults() == {"authorization": "abc"}
