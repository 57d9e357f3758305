"""Tests for configuration models and loading."""

from pathlib import Path

import pytest

from minisup.config import (
    ConfigLoadError,
    ConfigValidationError,
    LogFormat,
    LogLevel,
    SupervisorConfig,
    discover_config_file,
    load_config,
)
from minisup.supervisor import RunMode


class TestSupervisorConfig:
    def test_defaults(self) -> None:
        config = SupervisorConfig()

        assert config.command == ""
        assert not config.has_command
        assert config.type is RunMode.SIMPLE
        assert config.delay == 30000
        assert config.delay_seconds == 30.0
        assert config.output_limit == 0
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("Simple", RunMode.SIMPLE), ("DAEMON", RunMode.DAEMON), (" daemon ", RunMode.DAEMON)],
    )
    def test_type_is_case_insensitive(self, value: str, expected: RunMode) -> None:
        assert SupervisorConfig.from_dict({"type": value}).type is expected

    def test_blank_values_become_none(self) -> None:
        config = SupervisorConfig.from_dict(
            {"command": "  run.sh ", "folder": "  ", "arguments": ""}
        )

        assert config.command == "run.sh"
        assert config.folder is None
        assert config.arguments is None

    def test_string_values_are_coerced(self) -> None:
        config = SupervisorConfig.from_dict(
            {"delay": "1500", "logging": {"level": "WARNING", "max_bytes": "1024"}}
        )

        assert config.delay == 1500
        assert config.delay_seconds == 1.5
        assert config.logging.level is LogLevel.WARNING
        assert config.logging.max_bytes == 1024

    def test_unknown_type_is_rejected(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = SupervisorConfig.from_dict({"type": "forking"})

        assert exc_info.value.key == "type"
        assert exc_info.value.value == "forking"

    def test_negative_delay_is_rejected(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = SupervisorConfig.from_dict({"delay": -1})

        assert exc_info.value.key == "delay"

    def test_nested_error_key(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = SupervisorConfig.from_dict({"logging": {"level": "verbose"}})

        assert exc_info.value.key == "logging.level"

    def test_unknown_keys_are_ignored(self) -> None:
        config = SupervisorConfig.from_dict({"command": "run.sh", "restart": "always"})

        assert config.command == "run.sh"

    def test_to_process_spec(self) -> None:
        config = SupervisorConfig.from_dict(
            {"command": "run.sh", "folder": "/opt/app", "arguments": "--fast"}
        )

        spec = config.to_process_spec()

        assert spec.command == "run.sh"
        assert spec.working_directory == "/opt/app"
        assert spec.arguments == "--fast"

    def test_to_process_spec_requires_command(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = SupervisorConfig().to_process_spec()

        assert exc_info.value.key == "command"

    def test_to_dict_omits_unset_values(self) -> None:
        data = SupervisorConfig.from_dict({"command": "run.sh", "type": "Daemon"}).to_dict()

        assert data["command"] == "run.sh"
        assert data["type"] == "daemon"
        assert "folder" not in data
        assert data["logging"]["level"] == "info"


@pytest.mark.usefixtures("clean_env")
class TestLoadConfig:
    def test_defaults_without_sources(self) -> None:
        config = load_config(environ={})

        assert config == SupervisorConfig()

    def test_discovers_file_in_cwd(self, tmp_path: Path) -> None:
        _ = (tmp_path / "minisup.toml").write_text(
            'command = "backup.sh"\ntype = "Daemon"\ndelay = 5000\n'
        )

        assert discover_config_file() == tmp_path / "minisup.toml"
        config = load_config(environ={})

        assert config.command == "backup.sh"
        assert config.type is RunMode.DAEMON
        assert config.delay == 5000

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        _ = path.write_text('command = "job.sh"\nfolder = "/srv/jobs"\n')

        config = load_config(config_path=path, environ={})

        assert config.command == "job.sh"
        assert config.folder == "/srv/jobs"

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            _ = load_config(config_path=tmp_path / "missing.toml", environ={})

    def test_precedence(self, tmp_path: Path) -> None:
        _ = (tmp_path / "minisup.toml").write_text(
            'command = "file.sh"\ndelay = 1\narguments = "--file"\n'
        )
        environ = {"MINISUP_DELAY": "2", "MINISUP_ARGUMENTS": "--env"}

        config = load_config(environ=environ, cli_overrides={"arguments": "--cli"})

        assert config.command == "file.sh"
        assert config.delay == 2
        assert config.arguments == "--cli"

    def test_environment_can_be_skipped(self) -> None:
        config = load_config(include_env=False, environ={"MINISUP_COMMAND": "x"})

        assert config.command == ""

    def test_invalid_environment_value(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_config(environ={"MINISUP_DELAY": "soon"})

        assert exc_info.value.key == "delay"
