"""Git tag retrieval and resolution.

GitTagSource runs the git commands and returns raw tag names. TagResolver
decides which tag is the latest released semantic version:

1. Online: fetch origin, list local tags, keep only those that also
   exist on origin, pick the first one that is a valid semantic version.
2. Offline: skip the remote entirely and pick from local tags.

Local tags are never used in online mode when the remote cannot be
reached, because they may be stale or unpublished.
"""

from __future__ import annotations

from pathlib import Path

from .errors import TagParseError
from .logger import MonorepoLogger, get_logger
from .shell import ProcessExecutor
from .versions import parse_version

DEFAULT_REMOTE = "origin"

# "versionsort.suffix=-" keeps 2.0-rc below 2.0 when sorting by version.
SORTED_TAGS_COMMAND = (
    "git",
    "-c",
    "versionsort.suffix=-",
    "for-each-ref",
    "--sort=-version:refname",
    "--format=%(refname:short)",
    "refs/tags",
)

# Exit status of `git ls-remote --exit-code` when no matching refs exist.
LS_REMOTE_NO_REFS = 2


class GitTagSource:
    """Lists and fetches git tags of a working copy.

    Args:
        process: Executor used for every git command.
        root: Working copy the commands run in.
    """

    def __init__(self, process: ProcessExecutor, root: Path) -> None:
        self.process = process
        self.root = root
        self.last_error = ""

    def fetch_remote(self, remote: str = DEFAULT_REMOTE) -> bool:
        """Fetch the remote so its tags become known locally.

        The error output of a failed fetch is kept in ``last_error``.
        """
        result = self.process.run(["git", "fetch", remote], self.root)
        self.last_error = result.stderr.strip()
        return result.ok

    def list_sorted_tags(self) -> list[str]:
        """List all local tags, highest version first.

        Returns an empty list when there are no tags or git fails.
        """
        result = self.process.run(SORTED_TAGS_COMMAND, self.root)
        if not result.ok:
            self.last_error = result.stderr.strip()
            return []
        return self.process.split_lines(result.stdout)

    def list_remote_tag_names(self, remote: str = DEFAULT_REMOTE) -> list[str] | None:
        """List tag names that exist on the remote, unsorted.

        Returns:
            Tag names, an empty list if the remote has no tags, or None if
            the remote could not be queried.
        """
        result = self.process.run(
            ["git", "ls-remote", "-t", "--refs", "--exit-code", remote], self.root
        )
        if result.status == LS_REMOTE_NO_REFS:
            return []
        if not result.ok:
            self.last_error = result.stderr.strip()
            return None

        names: list[str] = []
        for line in self.process.split_lines(result.stdout):
            # "<sha>\trefs/tags/<name>"
            parts = line.split()
            if len(parts) < 2 or not parts[1].startswith("refs/tags/"):
                continue
            names.append(parts[1][len("refs/tags/") :])
        return names


class TagResolver:
    """Finds the highest semantic version tag visible in the current mode.

    Args:
        source: Where tags come from.
        offline_mode: Only consider local tags and never touch the remote.
        logger: Diagnostics sink.
        remote: Name of the remote that publishes releases.
    """

    def __init__(
        self,
        source: GitTagSource,
        offline_mode: bool = False,
        logger: MonorepoLogger | None = None,
        remote: str = DEFAULT_REMOTE,
    ) -> None:
        self.source = source
        self.offline_mode = offline_mode
        self.logger = logger or get_logger()
        self.remote = remote

    def resolve(self) -> str | None:
        """Return the highest valid semantic version tag, or None."""
        if self.offline_mode:
            self.logger.warning("Offline mode is active.")
        elif not self.source.fetch_remote(self.remote):
            self.logger.critical(
                "Unable to fetch remote {remote}. Error: {error}",
                context={"remote": self.remote, "error": self.source.last_error},
            )
            return None

        local_tags = self.source.list_sorted_tags()
        if not local_tags:
            self.logger.info("No tag found in the local repository.")
            return None
        self.logger.info(
            "The following local and remote tags found: {tags}.",
            context={"tags": ", ".join(local_tags)},
        )

        if self.offline_mode:
            candidates = local_tags
        else:
            remote_tags = self.source.list_remote_tag_names(self.remote)
            if remote_tags is None:
                self.logger.warning(
                    "Unable to list tags on remote {remote}. Error: {error}",
                    context={"remote": self.remote, "error": self.source.last_error},
                )
                return None
            if not remote_tags:
                self.logger.info(
                    "No tags found on remote {remote}. "
                    "All tags found earlier were local only.",
                    context={"remote": self.remote},
                )
                return None

            published = set(remote_tags)
            candidates = [tag for tag in local_tags if tag in published]
            self.logger.info(
                "The following tags found on remote {remote}: {tags}.",
                context={"remote": self.remote, "tags": ", ".join(candidates)},
            )

        return self.highest_valid_tag(candidates)

    def highest_valid_tag(self, candidates: list[str]) -> str | None:
        """Return the first candidate that is a semantic version.

        Candidates arrive in git's version order, highest first. That order
        is trusted as is: git compares "alpha10" above "alpha9" where semver
        precedence would not.
        """
        for tag in candidates:
            try:
                parse_version(tag)
            except TagParseError:
                self.logger.info(
                    "Skipping '{tag}' tag because it is not a valid semantic "
                    "versioning tag.",
                    context={"tag": tag},
                )
                continue
            self.logger.info(
                "'{tag}' is the highest semantic versioning tag.",
                context={"tag": tag},
            )
            return tag

        self.logger.info("No valid semantic versioning tag found.")
        return None
