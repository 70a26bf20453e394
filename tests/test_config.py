"""Tests for envteardown.yaml loading."""

import pytest

from envteardown.config.parser import Config, ConfigValidationError


class TestConfig:
    """Test suite for Config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = Config(str(tmp_path / "envteardown.yaml")).load().settings

        assert settings.state_dir == "."
        assert settings.log_level == "warning"
        assert settings.terraform_binary == "terraform"
        assert settings.aws_profile is None

    def test_file_values(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("state_dir: envs/prod\nlog_level: debug\nbosh_binary: /usr/local/bin/bosh\n")

        settings = Config(str(path)).load().settings

        assert settings.state_dir == "envs/prod"
        assert settings.log_level == "debug"
        assert settings.bosh_binary == "/usr/local/bin/bosh"

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("state_dir: from-file\nlog_level: info\n")

        settings = Config(str(path)).load({"state_dir": "from-cli", "log_level": None}).settings

        assert settings.state_dir == "from-cli"
        assert settings.log_level == "info"

    def test_empty_log_dir_disables_file_logging(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("log_dir: ''\n")

        assert Config(str(path)).load().settings.log_dir is None

    def test_invalid_log_level(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("log_level: loud\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            Config(str(path)).load()

        assert "log_level" in str(exc_info.value)

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("surprise: true\n")

        with pytest.raises(ConfigValidationError):
            Config(str(path)).load()

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigValidationError, match="must contain a mapping"):
            Config(str(path)).load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "envteardown.yaml"
        path.write_text("state_dir: [unclosed\n")

        with pytest.raises(ConfigValidationError, match="Failed to parse YAML"):
            Config(str(path)).load()
