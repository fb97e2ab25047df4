"""Tests for monorepo_helper.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import ScriptedProcess, write_manifest
from monorepo_helper.cli import cli
from monorepo_helper.repository import HEAD_COMMIT_COMMAND
from monorepo_helper.tags import SORTED_TAGS_COMMAND

GIT_DIR = ("git", "rev-parse", "--absolute-git-dir")
COMMIT = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture
def scripted(process: ScriptedProcess, monorepo: Path) -> ScriptedProcess:
    process.script(GIT_DIR, stdout=f"{monorepo / '.git'}\n")
    process.script(SORTED_TAGS_COMMAND, stdout="1.0.0\n0.9.0\n")
    process.script(HEAD_COMMIT_COMMAND, stdout=f"{COMMIT}\n")
    return process


def invoke(process: ScriptedProcess, *args: str):
    with patch("monorepo_helper.cli.ProcessExecutor", return_value=process):
        return CliRunner().invoke(cli, list(args))


class TestDiscover:
    def test_lists_packages(self, scripted: ScriptedProcess, monorepo: Path) -> None:
        result = invoke(scripted, "discover", "--root", str(monorepo), "--offline")

        assert result.exit_code == 0, result.output
        assert f"acme/alpha 1.0.1 (packages/alpha) {COMMIT}" in result.output
        assert f"acme/beta 3.0.0 (packages/beta) {COMMIT}" in result.output

    def test_exclude_option(self, scripted: ScriptedProcess, monorepo: Path) -> None:
        result = invoke(
            scripted,
            "discover",
            "--root",
            str(monorepo),
            "--offline",
            "--exclude",
            "beta",
        )

        assert result.exit_code == 0, result.output
        assert "acme/alpha" in result.output
        assert "acme/beta" not in result.output

    def test_max_depth_option(self, scripted: ScriptedProcess, monorepo: Path) -> None:
        result = invoke(
            scripted,
            "discover",
            "--root",
            str(monorepo),
            "--offline",
            "--max-depth",
            "1",
        )

        assert result.exit_code == 0, result.output
        assert "<no packages found>" in result.output

    def test_offline_from_pyproject(
        self, scripted: ScriptedProcess, monorepo: Path
    ) -> None:
        (monorepo / "pyproject.toml").write_text(
            "[tool.monorepo-helper]\noffline-mode = true\n"
        )
        result = invoke(scripted, "discover", "--root", str(monorepo))

        assert result.exit_code == 0, result.output
        assert scripted.count("git", "fetch") == 0
        assert "acme/alpha 1.0.1" in result.output

    def test_malformed_manifest(
        self, scripted: ScriptedProcess, monorepo: Path
    ) -> None:
        broken = monorepo / "packages" / "broken" / "composer.json"
        broken.parent.mkdir()
        broken.write_text("{")

        result = invoke(scripted, "discover", "--root", str(monorepo), "--offline")

        assert result.exit_code == 1
        assert str(broken) in result.output

    def test_not_a_git_repository(
        self, process: ScriptedProcess, tmp_path: Path
    ) -> None:
        write_manifest(tmp_path / "pkg", {"name": "acme/pkg"})
        result = invoke(process, "discover", "--root", str(tmp_path))

        assert result.exit_code == 1
        assert "Not a git repository" in result.output


class TestNextVersion:
    def test_prints_next_version(
        self, scripted: ScriptedProcess, monorepo: Path
    ) -> None:
        result = invoke(scripted, "next-version", "--root", str(monorepo), "--offline")

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "1.0.1"

    def test_prints_none_when_remote_unreachable(
        self, scripted: ScriptedProcess, monorepo: Path
    ) -> None:
        result = invoke(scripted, "next-version", "--root", str(monorepo))

        assert result.exit_code == 0, result.output
        assert result.output.strip().splitlines()[-1] == "<none>"
