"""Tests for ``satlock verify`` command.

Verifies:
    - A fresh lockfile verifies cleanly (exit code 0).
    - A changed manifest makes the lockfile stale (exit code 1).
    - Hand-edited lockfiles are reported (exit code 1).
    - Missing or corrupt lockfiles exit with code 2.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from satlock.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def locked_dir(runner: CliRunner, project_dir: Path) -> Path:
    """A project directory with a freshly written lockfile."""
    assert runner.invoke(cli, ["lock", str(project_dir)]).exit_code == 0
    return project_dir


class TestVerify:
    """Checking lockfiles against manifests."""

    def test_fresh_lockfile(self, runner: CliRunner, locked_dir: Path) -> None:
        result = runner.invoke(cli, ["verify", str(locked_dir)])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_stale_after_manifest_change(self, runner: CliRunner, locked_dir: Path) -> None:
        manifest = locked_dir / "satlock.yaml"
        manifest.write_text(manifest.read_text() + "# touched\n")
        result = runner.invoke(cli, ["verify", str(locked_dir)])
        assert result.exit_code == 1
        assert "stale" in result.output

    def test_hand_edited_version(self, runner: CliRunner, locked_dir: Path) -> None:
        path = locked_dir / "satlock-lock.json"
        data = json.loads(path.read_text())
        data["packages"]["web"]["version"] = "9.9.9"
        path.write_text(json.dumps(data))
        result = runner.invoke(cli, ["verify", str(locked_dir)])
        assert result.exit_code == 1
        assert "web@9.9.9" in result.output

    def test_missing_lockfile(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["verify", str(project_dir)])
        assert result.exit_code == 2
        assert "Cannot read lockfile" in result.output

    def test_corrupt_lockfile(self, runner: CliRunner, locked_dir: Path) -> None:
        (locked_dir / "satlock-lock.json").write_text("{oops")
        result = runner.invoke(cli, ["verify", str(locked_dir)])
        assert result.exit_code == 2

    def test_non_object_package_entry(self, runner: CliRunner, locked_dir: Path) -> None:
        (locked_dir / "satlock-lock.json").write_text('{"packages": {"web": "2.1.0"}}')
        result = runner.invoke(cli, ["verify", str(locked_dir)])
        assert result.exit_code == 2
        assert not isinstance(result.exception, AttributeError)

    def test_explicit_lockfile_path(
        self, runner: CliRunner, project_dir: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "elsewhere.json"
        runner.invoke(cli, ["lock", str(project_dir), "-o", str(out)])
        result = runner.invoke(cli, ["verify", str(project_dir), "--lockfile", str(out)])
        assert result.exit_code == 0
