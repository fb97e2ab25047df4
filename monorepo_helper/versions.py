"""Version parsing and bumping utilities.

Handles conversion between git tag names and SemanticVersion values, and
the two increments used to predict the next release: a patch bump for
final releases and an embedded-number bump for pre-releases
(``alpha1`` → ``alpha2``, ``rc9`` → ``rc10``).
"""

from __future__ import annotations

import re

import semver

from .errors import PrereleaseIncrementError, TagParseError
from .models import PrereleaseSegment, SemanticVersion

# Tags like "v1.2.3" or "=1.2.3" are accepted, the prefix is dropped.
_TAG_PREFIX = re.compile(r"^\s*[=vV]?\s*")


def parse_version(tag: str) -> SemanticVersion:
    """Parse a tag name into a SemanticVersion.

    Only ``MAJOR.MINOR.PATCH[-PRERELEASE]`` is accepted, optionally
    preceded by ``v`` or ``=``. Incomplete versions ("1.2") and build
    metadata ("1.2.3+build") are rejected.

    Raises:
        TagParseError: If the tag is not a semantic version.
    """
    core = _TAG_PREFIX.sub("", tag, count=1).rstrip()
    try:
        version = semver.Version.parse(core)
    except (ValueError, TypeError) as exc:
        raise TagParseError(tag, str(exc)) from exc
    if version.build:
        raise TagParseError(tag, "build metadata is not supported")

    return SemanticVersion(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        prerelease=_split_prerelease(version.prerelease or ""),
    )


def is_semantic_version(tag: str) -> bool:
    """Return True if tag can be parsed by parse_version()."""
    try:
        parse_version(tag)
    except TagParseError:
        return False
    return True


def _split_prerelease(prerelease: str) -> tuple[PrereleaseSegment, ...]:
    if not prerelease:
        return ()
    return tuple(
        int(part) if part.isdigit() else part for part in prerelease.split(".")
    )


def split_trailing_number(identifier: str) -> tuple[str, str]:
    """Split an identifier into its head and trailing digit run.

    Examples:
        "alpha1" → ("alpha", "1")
        "rc.12" → ("rc.", "12")
        "beta" → ("beta", "")
    """
    end = len(identifier)
    start = end
    while start > 0 and identifier[start - 1].isdigit():
        start -= 1
    return identifier[:start], identifier[start:]


def increment_patch(version: SemanticVersion) -> SemanticVersion:
    """Increment the patch number and drop any pre-release.

    Examples:
        1.2.3 → 1.2.4
        1.2.3-rc1 → 1.2.4
    """
    bumped = version.to_semver().bump_patch()
    return SemanticVersion(major=bumped.major, minor=bumped.minor, patch=bumped.patch)


def increment_prerelease(version: SemanticVersion) -> SemanticVersion:
    """Increment the number embedded at the end of the pre-release.

    semver's own bump_prerelease() turns "alpha1" into "alpha1.1"; here the
    trailing number is bumped in place without padding or separators.

    Examples:
        1.0.0-alpha1 → 1.0.0-alpha2
        2.0.0-rc9 → 2.0.0-rc10

    Raises:
        PrereleaseIncrementError: If there is no pre-release, it does
            not end with a number, or digits also appear before that
            number ("a1b2").
    """
    identifier = version.prerelease_identifier
    head, number = split_trailing_number(identifier)
    if not number or any(char.isdigit() for char in head):
        raise PrereleaseIncrementError(identifier)

    return SemanticVersion(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        prerelease=_split_prerelease(f"{head}{int(number) + 1}"),
    )


def next_version(version: SemanticVersion) -> SemanticVersion:
    """Predict the release that follows version.

    Pre-releases get their embedded number bumped, final releases get a
    patch bump.
    """
    if version.prerelease:
        return increment_prerelease(version)
    return increment_patch(version)
