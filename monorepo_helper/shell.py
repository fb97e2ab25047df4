"""Shell and git utilities.

Provides a small process executor used for every git invocation, plus
output formatting helpers for the command line. The executor is injected
into the components that need it so tests can replace it with a scripted
fake.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel


class ProcessResult(BaseModel):
    """Outcome of a finished process.

    Attributes:
        status: Exit status. 0 means success.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


class ProcessExecutor:
    """Runs external commands and captures their output.

    Never raises for a failing command: a non-zero exit is reported in
    the result, and an executable that cannot be started is reported as
    status 127 with the OS error in stderr.
    """

    def run(
        self, command: Sequence[str], cwd: Path | str | None = None
    ) -> ProcessResult:
        """Run a command and return its exit status and output.

        Args:
            command: Command and arguments (e.g., ["git", "fetch", "origin"]).
            cwd: Working directory, defaults to the current one.
        """
        try:
            result = subprocess.run(
                list(command),
                cwd=None if cwd is None else str(cwd),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            return ProcessResult(status=127, stderr=str(exc))
        return ProcessResult(
            status=result.returncode, stdout=result.stdout, stderr=result.stderr
        )

    @staticmethod
    def split_lines(output: str) -> list[str]:
        """Split process output into non-empty, stripped lines."""
        return [line.strip() for line in output.splitlines() if line.strip()]


def step(msg: str) -> str:
    """Format a visually distinct step header.

    Used to separate phases of the command line output.
    """
    return f"\n{'─' * 60}\n{msg}\n{'─' * 60}"
