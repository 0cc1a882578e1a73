"""Unit tests for environment settings."""

from pathlib import Path
from unittest.mock import patch

from godotpilot.config import Settings, load_settings


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self):
        """Test defaults with an empty environment."""
        settings = Settings.from_env({})
        assert settings.bridge_host == "127.0.0.1"
        assert settings.bridge_port == 6100
        assert settings.bridge_timeout == 5
        assert settings.bridge_detailed_timeout == 8
        assert settings.stall_initial_limit == 4
        assert settings.stall_steady_limit == 6
        assert settings.project_root == Path(".").resolve()
        assert settings.debug is False

    def test_overrides(self, tmp_path):
        """Test values are read from the environment."""
        settings = Settings.from_env({
            "GODOT_PROJECT_PATH": str(tmp_path),
            "GODOT_BRIDGE_PORT": "7010",
            "GODOT_BRIDGE_TIMEOUT": "2.5",
            "GODOT_STALL_INITIAL_LIMIT": "3",
            "GODOT_STALL_STEADY_LIMIT": "9",
            "GODOTPILOT_DEBUG": "yes",
        })
        assert settings.project_root == tmp_path.resolve()
        assert settings.bridge_port == 7010
        assert settings.bridge_timeout == 2.5
        assert settings.stall_initial_limit == 3
        assert settings.stall_steady_limit == 9
        assert settings.debug is True

    def test_invalid_values_fall_back(self):
        """Test invalid or non-positive numbers use the defaults."""
        settings = Settings.from_env({
            "GODOT_BRIDGE_PORT": "not-a-port",
            "GODOT_STALL_INITIAL_LIMIT": "0",
            "GODOT_STALL_STEADY_LIMIT": "-2",
            "GODOT_BRIDGE_TIMEOUT": "abc",
        })
        assert settings.bridge_port == 6100
        assert settings.stall_initial_limit == 4
        assert settings.stall_steady_limit == 6
        assert settings.bridge_timeout == 5

    def test_load_settings_reads_environ(self):
        """Test load_settings uses os.environ."""
        with patch.dict('os.environ', {"GODOT_BRIDGE_HOST": "10.0.0.5"}, clear=True):
            with patch('godotpilot.config.load_dotenv'):
                assert load_settings().bridge_host == "10.0.0.5"
