"""
Unit tests for configuration module.
"""

from pathlib import Path

import pytest

from zappingtv.config import (
    ApiConfig,
    CredentialsConfig,
    LoggingConfig,
    PlayerConfig,
    ZappingConfig,
    get_config,
    load_config,
    reload_config,
)


@pytest.mark.unit
class TestApiConfig:
    """Tests for ApiConfig."""

    def test_default_values(self):
        """Test default API configuration values."""
        config = ApiConfig()

        assert config.user_agent == "Zapping/node-1.0"
        assert config.verify_ssl is False
        assert config.endpoints.channel_list.startswith("https://alquinta.zappingtv.com/")
        assert config.endpoints.smart_tv == "https://app.zappingtv.com/smart"

    def test_custom_values(self):
        """Test custom API configuration."""
        config = ApiConfig(user_agent="Test/1.0", timeout=3, verify_ssl=True)

        assert config.user_agent == "Test/1.0"
        assert config.timeout == 3.0
        assert config.verify_ssl is True


@pytest.mark.unit
class TestPlayerConfig:
    """Tests for PlayerConfig."""

    def test_default_values(self):
        config = PlayerConfig()

        assert config.path == "mpv"
        assert config.heartbeat_interval == 25
        assert "--force-seekable=yes" in config.extra_args

    def test_extra_args_are_not_shared(self):
        first = PlayerConfig()
        first.extra_args.append("--mute=yes")

        assert "--mute=yes" not in PlayerConfig().extra_args


@pytest.mark.unit
class TestCredentialsConfig:
    """Tests for CredentialsConfig."""

    def test_token_path_expands_home(self):
        config = CredentialsConfig(token_file="~/.config/zapping-node")

        assert config.token_path == Path.home() / ".config" / "zapping-node"


@pytest.mark.unit
class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self):
        config = LoggingConfig()

        assert config.level == "INFO"
        assert "%(asctime)s" in config.format
        assert config.clear_on_startup is True
        assert config.console is False


@pytest.mark.unit
class TestLoadConfig:
    """Tests for config loading functions."""

    def test_load_from_file(self, temp_config_file, temp_dir, monkeypatch):
        monkeypatch.delenv("ZAPPINGTV_TOKEN_FILE")
        monkeypatch.delenv("ZAPPINGTV_LOG_FILE")

        config = load_config(str(temp_config_file))

        assert config.api.user_agent == "ZappingTest/1.0"
        assert config.api.timeout == 5.0
        assert config.player.path == "/usr/local/bin/mpv"
        assert config.player.heartbeat_interval == 10
        assert config.credentials.token_path == temp_dir / "token"
        assert config.logging.level == "DEBUG"

    def test_missing_file_gives_defaults(self, temp_dir):
        config = load_config(str(temp_dir / "missing.yaml"))

        assert isinstance(config, ZappingConfig)
        assert config.player.path == "mpv"

    def test_config_yaml_in_working_directory(self, temp_dir):
        (temp_dir / "config.yaml").write_text("player:\n  path: /opt/mpv\n")

        config = load_config()

        assert config.player.path == "/opt/mpv"

    def test_env_overrides_file(self, temp_config_file, monkeypatch):
        monkeypatch.setenv("ZAPPINGTV_MPV_PATH", "/snap/bin/mpv")
        monkeypatch.setenv("ZAPPINGTV_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("ZAPPINGTV_VERIFY_SSL", "true")

        config = load_config(str(temp_config_file))

        assert config.player.path == "/snap/bin/mpv"
        assert config.logging.level == "WARNING"
        assert config.api.verify_ssl is True
        # Untouched keys keep the file's values
        assert config.api.user_agent == "ZappingTest/1.0"

    def test_get_config_caching(self):
        """Test that get_config returns cached config."""
        config1 = get_config()
        config2 = get_config()

        assert config1 is config2

    def test_reload_config_creates_new_instance(self):
        config1 = get_config()
        config2 = reload_config()

        assert config1 is not config2
        assert isinstance(config2, ZappingConfig)
