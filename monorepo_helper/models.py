"""Data models for monorepo-helper.

These Pydantic models represent the core values passed between the
discovery, tag resolution and version guessing steps. All of them are
immutable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Union

import semver
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt

PrereleaseSegment = Union[int, str]


class SemanticVersion(BaseModel):
    """A ``major.minor.patch[-prerelease]`` version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot separated pre-release identifiers; numeric
                    identifiers are stored as ints.
    """

    model_config = ConfigDict(frozen=True)

    major: NonNegativeInt
    minor: NonNegativeInt
    patch: NonNegativeInt
    prerelease: tuple[PrereleaseSegment, ...] = ()

    @property
    def prerelease_identifier(self) -> str:
        """The pre-release identifiers joined back into one string."""
        return ".".join(str(segment) for segment in self.prerelease)

    def to_semver(self) -> semver.Version:
        """Convert to a semver.Version, mainly for precedence comparisons."""
        return semver.Version(
            self.major,
            self.minor,
            self.patch,
            prerelease=self.prerelease_identifier or None,
        )

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{self.prerelease_identifier}"
        return core


class Undetermined(BaseModel):
    """The next version has not been computed yet in this run."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["undetermined"] = "undetermined"


class Determined(BaseModel):
    """The next version was computed from the highest remote tag."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["determined"] = "determined"
    version: SemanticVersion


class NotAvailable(BaseModel):
    """The computation ran, but no usable tag was found or git was unreachable."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_available"] = "not_available"


VersionGuessResult = Union[Undetermined, Determined, NotAvailable]


class DiscoveryConfig(BaseModel):
    """Settings for one discovery run.

    Attributes:
        monorepo_root: Absolute path of the monorepo working copy.
        max_depth: Deepest directory level (relative to the root) that
                   is searched for manifests.
        excluded_directory_names: Directory names that are never entered.
        offline_mode: Skip remote tag fetching and use local tags only.
    """

    model_config = ConfigDict(frozen=True)

    monorepo_root: Path
    max_depth: PositiveInt = 5
    excluded_directory_names: frozenset[str] = frozenset()
    offline_mode: bool = False


class DiscoveredPackage(BaseModel):
    """A sub-project found inside the monorepo.

    Attributes:
        manifest_path: Path to the sub-project's manifest file.
        manifest_data: Parsed manifest document.
        assigned_version: Version offered to the resolver.
        dist_reference: Commit hash, or the manifest's content hash when
                        no commit is available.
    """

    model_config = ConfigDict(frozen=True)

    manifest_path: Path
    manifest_data: dict[str, Any] = Field(default_factory=dict)
    assigned_version: str
    dist_reference: str

    @property
    def path(self) -> Path:
        """Directory containing the manifest."""
        return self.manifest_path.parent
