"""Shared test fixtures."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from monorepo_helper.shell import ProcessExecutor, ProcessResult


class ScriptedProcess(ProcessExecutor):
    """ProcessExecutor double answering commands from a script.

    Unscripted commands fail with status 1. Every call is recorded.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, ...], ProcessResult] = {}
        self.calls: list[tuple[tuple[str, ...], Path | str | None]] = []

    def script(
        self,
        command: Sequence[str],
        status: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.responses[tuple(command)] = ProcessResult(
            status=status, stdout=stdout, stderr=stderr
        )

    def run(
        self, command: Sequence[str], cwd: Path | str | None = None
    ) -> ProcessResult:
        self.calls.append((tuple(command), cwd))
        return self.responses.get(
            tuple(command), ProcessResult(status=1, stderr="unscripted command")
        )

    def count(self, *prefix: str) -> int:
        """Number of recorded calls whose command starts with prefix."""
        return sum(1 for command, _ in self.calls if command[: len(prefix)] == prefix)


def write_manifest(directory: Path, data: dict[str, Any]) -> Path:
    """Write a composer.json into directory, creating it if needed."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "composer.json"
    manifest.write_text(json.dumps(data))
    return manifest


@pytest.fixture
def process() -> ScriptedProcess:
    return ScriptedProcess()


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    """A monorepo working copy with two packages."""
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    write_manifest(root / "packages" / "alpha", {"name": "acme/alpha"})
    write_manifest(
        root / "packages" / "beta",
        {"name": "acme/beta", "type": "drupal-module", "version": "3.0.0"},
    )
    return root


@pytest.fixture(autouse=True)
def reset_package_logger() -> None:
    """Undo configure_logging() so caplog sees every record."""
    logger = logging.getLogger("monorepo_helper")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
