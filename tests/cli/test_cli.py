"""Unit tests for CLI commands.

Tests CLI behavior using Click's CliRunner for isolated, fast testing.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from buildinfo.cli import cli
from buildinfo.models import BuildInfo, Source, SourceType, encode_buildinfo


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_app_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep config lookups away from the real user config and reset logging."""
    monkeypatch.delenv("BUILDINFO_CONFIG", raising=False)
    app_dir = tmp_path / "app"
    monkeypatch.setattr("buildinfo.config.get_app_dir", lambda: app_dir)
    yield app_dir
    logger = logging.getLogger("buildinfo")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def record() -> BuildInfo:
    """A finished record."""
    return BuildInfo(
        frontend="dockerfile.v0",
        attrs={"build-arg:FOO": "bar"},
        sources=[Source(type=SourceType.DOCKER_IMAGE, ref="docker.io/library/alpine:latest", pin="sha256:1")],
    )


class TestVersion:
    """Tests for --version flag."""

    @pytest.mark.parametrize("flag", ["--version", "-v"])
    def test_version_flag_shows_version(self, runner: CliRunner, flag: str) -> None:
        """Given --version flag, returns version string."""
        # Act
        result = runner.invoke(cli, [flag])

        # Assert
        assert result.exit_code == 0
        assert "buildinfo 0.1.0" in result.output


class TestHelp:
    """Tests for help output."""

    def test_root_help_shows_commands(self, runner: CliRunner) -> None:
        """Given --help, shows available commands."""
        # Act
        result = runner.invoke(cli, ["--help"])

        # Assert
        assert result.exit_code == 0
        for command in ["accumulate", "finalize", "format", "image-config", "filter-attrs", "config"]:
            assert command in result.output

    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        """Given no command, shows help."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "Usage:" in result.output


class TestRecordCommands:
    """Tests for accumulate and finalize."""

    def test_accumulate_then_finalize(self, runner: CliRunner) -> None:
        """A record is built up in the store across both commands."""
        with runner.isolated_filesystem():
            # Act
            first = runner.invoke(
                cli,
                [
                    "accumulate",
                    "meta/linux/amd64",
                    "-r",
                    "records.json",
                    "-f",
                    "dockerfile.v0",
                    "-a",
                    "build-arg:FOO=a=b",
                    "-a",
                    "build-arg:BUILDKIT_INLINE_CACHE=1",
                    "-a",
                    "context:base::linux/amd64=docker-image://alpine",
                ],
            )
            second = runner.invoke(
                cli,
                ["finalize", "meta/linux/amd64", "-r", "records.json", "-s", "docker-image://alpine=sha256:1"],
            )
            store = json.loads(Path("records.json").read_text())

        # Assert
        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert "Record finalized: meta/linux/amd64" in second.output
        assert store == {
            "meta/linux/amd64": {
                "frontend": "dockerfile.v0",
                "attrs": {"build-arg:FOO": "a=b", "context:base": "docker-image://alpine"},
                "sources": [{"type": "docker-image", "ref": "docker.io/library/alpine:latest", "pin": "sha256:1"}],
            }
        }

    def test_accumulate_keeps_other_keys(self, runner: CliRunner) -> None:
        """Records for other keys are left untouched."""
        with runner.isolated_filesystem():
            runner.invoke(cli, ["accumulate", "a", "-r", "records.json", "-f", "x"])
            runner.invoke(cli, ["accumulate", "b", "-r", "records.json", "-f", "y"])
            store = json.loads(Path("records.json").read_text())

        assert store == {"a": {"frontend": "x"}, "b": {"frontend": "y"}}

    def test_attr_without_equals_rejected(self, runner: CliRunner) -> None:
        """Attributes must be KEY=VALUE."""
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["accumulate", "meta", "-r", "records.json", "-a", "target"])

        assert result.exit_code == 2
        assert "expected NAME=VALUE" in result.output

    def test_finalize_malformed_source_fails(self, runner: CliRunner) -> None:
        """A malformed identifier exits 1 and leaves no store behind."""
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["finalize", "meta", "-r", "records.json", "-s", "alpine=sha256:1"])
            exists = Path("records.json").exists()

        assert result.exit_code == 1
        assert "failed to parse alpine" in result.output
        assert not exists

    def test_corrupt_store_fails(self, runner: CliRunner) -> None:
        """An unreadable store exits 1."""
        with runner.isolated_filesystem():
            Path("records.json").write_text("[1, 2]")
            result = runner.invoke(cli, ["accumulate", "meta", "-r", "records.json"])

        assert result.exit_code == 1
        assert "must map metadata keys" in result.output


class TestInspectCommands:
    """Tests for format, image-config and filter-attrs."""

    def test_format_remove_attrs(self, runner: CliRunner, record: BuildInfo) -> None:
        """--remove-attrs drops attrs from the printed record."""
        with runner.isolated_filesystem():
            Path("record.json").write_bytes(record.to_json())
            result = runner.invoke(cli, ["format", "record.json", "--remove-attrs"])

        assert result.exit_code == 0
        assert json.loads(result.output) == json.loads(record.without_attrs().to_json())

    def test_format_invalid_record(self, runner: CliRunner) -> None:
        """An invalid record exits 1."""
        with runner.isolated_filesystem():
            Path("record.json").write_text("{nope")
            result = runner.invoke(cli, ["format", "record.json"])

        assert result.exit_code == 1
        assert "failed to unmarshal buildinfo for formatting" in result.output

    def test_image_config_with_record(self, runner: CliRunner, record: BuildInfo) -> None:
        """The embedded record is printed."""
        config = {"architecture": "amd64", "moby.buildkit.buildinfo.v1": encode_buildinfo(record)}
        with runner.isolated_filesystem():
            Path("config.json").write_text(json.dumps(config))
            result = runner.invoke(cli, ["image-config", "config.json"])

        assert result.exit_code == 0
        assert BuildInfo.model_validate(json.loads(result.output)) == record

    def test_image_config_without_record(self, runner: CliRunner) -> None:
        """A config without a record is reported, not an error."""
        with runner.isolated_filesystem():
            Path("config.json").write_text('{"architecture": "amd64"}')
            result = runner.invoke(cli, ["image-config", "config.json"])

        assert result.exit_code == 0
        assert "No build info in image config." in result.output

    def test_filter_attrs_platform(self, runner: CliRunner) -> None:
        """Filtering is shown for the given metadata key."""
        result = runner.invoke(
            cli,
            [
                "filter-attrs",
                "meta/linux/amd64",
                "-a",
                "context:base::linux/amd64=ref1",
                "-a",
                "context:base::linux/arm64=ref2",
                "-a",
                "unknown=z",
            ],
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"context:base": "ref1"}


class TestConfigCommands:
    """Tests for the config command group."""

    def test_path(self, runner: CliRunner, isolated_app_dir: Path) -> None:
        """Shows the default config path."""
        result = runner.invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert str(isolated_app_dir / "config.json") in result.output

    def test_init_then_show(self, runner: CliRunner, isolated_app_dir: Path) -> None:
        """init writes a config that show displays."""
        init = runner.invoke(cli, ["config", "init", "--log-level", "DEBUG"])
        show = runner.invoke(cli, ["config", "show"])

        assert init.exit_code == 0
        assert (isolated_app_dir / "config.json").exists()
        assert show.exit_code == 0
        assert "log_level: DEBUG" in show.output

    def test_explicit_config_option_used(self, runner: CliRunner, tmp_path: Path, isolated_app_dir: Path) -> None:
        """--config on the group selects the file for config subcommands."""
        # Arrange
        explicit = tmp_path / "explicit.json"

        # Act
        init = runner.invoke(cli, ["--config", str(explicit), "config", "init", "--log-level", "INFO"])
        path = runner.invoke(cli, ["--config", str(explicit), "config", "path"])
        show = runner.invoke(cli, ["--config", str(explicit), "config", "show"])

        # Assert
        assert init.exit_code == 0, init.output
        assert explicit.exists()
        assert not (isolated_app_dir / "config.json").exists()
        assert str(explicit) in path.output
        assert "log_level: INFO" in show.output

    def test_init_refuses_overwrite(self, runner: CliRunner) -> None:
        """A second init without --force fails."""
        runner.invoke(cli, ["config", "init"])
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_show_defaults(self, runner: CliRunner) -> None:
        """Without a file, defaults are shown."""
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "log_level: WARNING" in result.output
        assert "Using defaults" in result.output

    def test_broken_config_blocks_other_commands(self, runner: CliRunner, isolated_app_dir: Path) -> None:
        """An invalid config file makes commands exit 1."""
        isolated_app_dir.mkdir(parents=True)
        (isolated_app_dir / "config.json").write_text("{nope")

        result = runner.invoke(cli, ["filter-attrs", "meta"])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
