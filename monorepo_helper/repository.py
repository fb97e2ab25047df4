"""Repository of packages discovered inside the monorepo.

Each sub-project found by discovery is turned into a package record
installed from its local path (symlinked, never copied) and offered to
the host resolver with the version chosen by MonorepoVersionGuesser.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .discovery import MANIFEST_NAME, discover_package_roots
from .guesser import MonorepoVersionGuesser
from .host import PackageLoader
from .logger import MonorepoLogger, get_logger
from .manifest import content_reference, read_manifest
from .models import DiscoveredPackage, DiscoveryConfig
from .shell import ProcessExecutor

HEAD_COMMIT_COMMAND = ("git", "log", "-n1", "--pretty=%H")


class MonorepoRepository:
    """Offers every sub-project of the monorepo as an installable package.

    Packages are discovered lazily on first access. A disabled repository
    stays empty, as if it was never registered.

    Args:
        config: Discovery settings, including the monorepo root.
        loader: Host loader that builds package objects.
        process: Executor used to read the current commit.
        version_guesser: Chooses the version of each package.
        logger: Diagnostics sink.
    """

    def __init__(
        self,
        config: DiscoveryConfig,
        loader: PackageLoader,
        process: ProcessExecutor,
        version_guesser: MonorepoVersionGuesser,
        logger: MonorepoLogger | None = None,
    ) -> None:
        self.config = config
        self.loader = loader
        self.process = process
        self.version_guesser = version_guesser
        self.logger = logger or get_logger()
        self.enabled = True
        self.discovered: list[DiscoveredPackage] = []
        self._packages: list[Any] | None = None

    @property
    def monorepo_root(self) -> Path:
        return self.config.monorepo_root

    def disable(self, reason: str) -> None:
        """Disable the repository so it offers no packages.

        Args:
            reason: Explanation why the repository got disabled.
        """
        self.enabled = False
        self.logger.info(reason)

    def get_packages(self) -> list[Any]:
        """Return the loaded packages, discovering them on first call."""
        if self._packages is None:
            self.initialize()
        return list(self._packages or [])

    def add_package(self, package: Any) -> None:
        if self._packages is None:
            self._packages = []
        self._packages.append(package)

    def initialize(self) -> None:
        """Discover and load all packages of the monorepo.

        Nothing is kept when a manifest fails to parse, so a later call
        raises again instead of offering a partial set.

        Raises:
            ManifestParseError: If any sub-project manifest is malformed.
        """
        if not self.enabled:
            self._packages = []
            return

        discovered: list[DiscoveredPackage] = []
        packages: list[Any] = []
        for package_root in self.package_roots():
            found = self.build_package(package_root)
            package = self.loader.load(self.package_data(found))
            discovered.append(found)
            packages.append(package)

        self.discovered = discovered
        self._packages = []
        for found, package in zip(discovered, packages):
            self.add_package(package)
            self.logger.info(
                "Added {package} {type} as {version} version from the monorepo.",
                context={
                    "package": getattr(package, "name", found.path),
                    "type": getattr(package, "type", "library"),
                    "version": getattr(package, "version", found.assigned_version),
                },
            )

    def package_roots(self) -> Iterator[Path]:
        """Yield the directory of every sub-project manifest."""
        return discover_package_roots(
            self.monorepo_root,
            self.config.max_depth,
            self.config.excluded_directory_names,
        )

    def build_package(self, package_root: Path) -> DiscoveredPackage:
        """Read one sub-project and decide its version and dist reference."""
        manifest_path = package_root / MANIFEST_NAME
        data, raw = read_manifest(manifest_path)

        version = self.version_guesser.guess_version(data, package_root)
        reference = self.head_commit(package_root) or content_reference(raw)

        return DiscoveredPackage(
            manifest_path=manifest_path,
            manifest_data=data,
            assigned_version=version,
            dist_reference=reference,
        )

    def head_commit(self, package_root: Path) -> str | None:
        """Return the monorepo's current commit, if it is a git working copy.

        This is the HEAD of the whole working copy, shared by every package,
        not the last commit touching package_root.
        """
        if not (self.monorepo_root / ".git").is_dir():
            return None
        result = self.process.run(HEAD_COMMIT_COMMAND, package_root)
        commit = result.stdout.strip()
        if not result.ok or not commit:
            return None
        return commit

    @staticmethod
    def package_data(discovered: DiscoveredPackage) -> dict[str, Any]:
        """Build the package document passed to the host loader."""
        data = dict(discovered.manifest_data)
        data["dist"] = {
            "type": "path",
            "url": str(discovered.path),
            "reference": discovered.dist_reference,
        }
        # Symlink instead of copying the package directory
        data["transport-options"] = {"symlink": True}
        data["version"] = discovered.assigned_version
        return data
