"""Version guessing for packages inside the monorepo.

Every sub-package without an explicit version gets the same predicted
"next" version, computed once per run from the highest released git tag.
When no tag can be used, the host's working-copy heuristic decides.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from .errors import PrereleaseIncrementError
from .logger import MonorepoLogger, get_logger
from .models import (
    Determined,
    NotAvailable,
    SemanticVersion,
    Undetermined,
    VersionGuessResult,
)
from .shell import ProcessExecutor
from .tags import TagResolver
from .versions import next_version, parse_version

DEFAULT_DEV_VERSION = "dev-master"
PLACEHOLDER = "9999999"

_PLACEHOLDER_RUN = re.compile(r"(\.9{7})+")
_BRANCH_VERSION = re.compile(
    r"^v?(\d+)(\.(?:\d+|[xX*]))?(\.(?:\d+|[xX*]))?(\.(?:\d+|[xX*]))?$"
)


class FallbackVersionGuesser(Protocol):
    """Guesses a version from the state of a working copy."""

    def guess_version(
        self, manifest_data: Mapping[str, Any], package_root: Path
    ) -> str | None: ...


class BranchVersionGuesser:
    """Derives a development version from the checked-out branch.

    Version-like branches ("1.x", "2.1", "v3") become padded dev versions
    ("1.9999999.9999999.9999999-dev"), other branches become
    "dev-<branch>". Returns None on a detached HEAD or outside git.
    """

    def __init__(self, process: ProcessExecutor) -> None:
        self.process = process

    def guess_version(
        self, manifest_data: Mapping[str, Any], package_root: Path
    ) -> str | None:
        result = self.process.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"], package_root
        )
        branch = result.stdout.strip()
        if not result.ok or not branch or branch == "HEAD":
            return None
        return normalize_branch(branch)


def normalize_branch(branch: str) -> str:
    """Normalize a branch name to a dev version.

    Examples:
        "1.x" → "1.9999999.9999999.9999999-dev"
        "2.1" → "2.1.9999999.9999999-dev"
        "main" → "dev-main"
    """
    match = _BRANCH_VERSION.match(branch)
    if not match:
        return f"dev-{branch}"

    parts = [match.group(1)]
    for group in match.groups()[1:]:
        part = group[1:] if group else "x"
        parts.append(PLACEHOLDER if part in ("x", "X", "*") else part)
    return ".".join(parts) + "-dev"


class MonorepoVersionGuesser:
    """Assigns versions to monorepo packages.

    Args:
        monorepo_root: Absolute path of the monorepo working copy.
        resolver: Finds the latest released tag.
        fallback: Host heuristic used when no tag is usable.
        logger: Diagnostics sink.
    """

    def __init__(
        self,
        monorepo_root: Path,
        resolver: TagResolver,
        fallback: FallbackVersionGuesser,
        logger: MonorepoLogger | None = None,
    ) -> None:
        self.monorepo_root = monorepo_root
        self.resolver = resolver
        self.fallback = fallback
        self.logger = logger or get_logger()
        self._next: VersionGuessResult = Undetermined()

    def guess_version(
        self, manifest_data: Mapping[str, Any], package_root: Path
    ) -> str:
        """Return the version to offer for one package.

        1. An explicit manifest version is always kept.
        2. Otherwise the shared next version, if one could be determined.
        3. Otherwise the fallback heuristic's dev version, with its
           placeholder run collapsed to ".x", or "dev-master".
        """
        declared = manifest_data.get("version")
        if declared is not None:
            return str(declared)

        result = self.next_semantic_version()
        if isinstance(result, Determined):
            return str(result.version)

        version = DEFAULT_DEV_VERSION
        guessed = self.fallback.guess_version(manifest_data, package_root)
        if guessed and guessed.endswith("-dev") and _PLACEHOLDER_RUN.search(guessed):
            version = _PLACEHOLDER_RUN.sub(".x", guessed)
        return version

    def next_semantic_version(self) -> VersionGuessResult:
        """Compute the next version for the whole monorepo, once per run."""
        if isinstance(self._next, Undetermined):
            self._next = self._compute_next_version()
        return self._next

    def _compute_next_version(self) -> VersionGuessResult:
        tag = self.resolver.resolve()
        if tag is None:
            return NotAvailable()

        latest: SemanticVersion = parse_version(tag)
        try:
            upcoming = next_version(latest)
        except PrereleaseIncrementError as exc:
            self.logger.warning(
                "Unable to compute the next version after '{tag}': {error}",
                context={"tag": tag, "error": exc},
            )
            return NotAvailable()

        self.logger.info(
            "'{version}' is the next semantic version for all packages "
            "inside the monorepo.",
            context={"version": upcoming},
        )
        return Determined(version=upcoming)
