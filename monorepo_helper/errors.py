"""Exception classes for monorepo-helper."""

from __future__ import annotations

from pathlib import Path


class MonorepoHelperError(Exception):
    """Base exception for all monorepo-helper errors."""


class TagParseError(MonorepoHelperError, ValueError):
    """Raised when a tag is not a valid semantic version."""

    def __init__(self, tag: str, reason: str = "") -> None:
        self.tag = tag
        message = f"'{tag}' is not a valid semantic version"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PrereleaseIncrementError(MonorepoHelperError, ValueError):
    """Raised when a pre-release is not a name followed by a number."""

    def __init__(self, prerelease: str) -> None:
        self.prerelease = prerelease
        super().__init__(
            f"Pre-release identifier '{prerelease}' is not a name followed by "
            "a number."
        )


class ManifestParseError(MonorepoHelperError):
    """Raised when a sub-project manifest cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Unable to parse {path}: {reason}")


class ConfigurationError(MonorepoHelperError):
    """Raised when a configuration value has an invalid format."""
