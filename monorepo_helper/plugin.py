"""Plugin activation.

Wires configuration, tag resolution, version guessing and the monorepo
repository together and registers the repository with the host ahead of
every other source. Any missing prerequisite disables the plugin quietly:
the host then resolves exactly as if the plugin was not installed.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from .config import PluginConfiguration
from .guesser import BranchVersionGuesser, MonorepoVersionGuesser
from .host import ArrayLoader, Host, PackageLoader
from .logger import MonorepoLogger, get_logger
from .models import DiscoveryConfig
from .repository import MonorepoRepository
from .shell import ProcessExecutor
from .tags import GitTagSource, TagResolver


def build_repository(
    config: DiscoveryConfig,
    process: ProcessExecutor,
    loader: PackageLoader | None = None,
    logger: MonorepoLogger | None = None,
) -> MonorepoRepository:
    """Assemble a MonorepoRepository and its collaborators."""
    logger = logger or get_logger()
    resolver = TagResolver(
        GitTagSource(process, config.monorepo_root),
        offline_mode=config.offline_mode,
        logger=logger,
    )
    guesser = MonorepoVersionGuesser(
        config.monorepo_root, resolver, BranchVersionGuesser(process), logger
    )
    return MonorepoRepository(
        config, loader or ArrayLoader(), process, guesser, logger
    )


def detect_monorepo_root(process: ProcessExecutor, cwd: Path) -> Path | None:
    """Return the top directory of the git working copy containing cwd."""
    result = process.run(["git", "rev-parse", "--absolute-git-dir"], cwd)
    git_dir = result.stdout.strip()
    if not result.ok or not git_dir:
        return None
    return Path(git_dir).parent


class Plugin:
    """Monorepo helper plugin for a host package manager."""

    def __init__(self, logger: MonorepoLogger | None = None) -> None:
        self.logger = logger or get_logger()
        self.repository: MonorepoRepository | None = None

    def activate(
        self,
        host: Host,
        *,
        process: ProcessExecutor | None = None,
        cwd: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> MonorepoRepository | None:
        """Register the monorepo repository with the host.

        Returns:
            The registered repository, or None if the plugin disabled itself.
        """
        process = process or ProcessExecutor()
        cwd = cwd or Path.cwd()
        configuration = PluginConfiguration.from_manifest(host.root_manifest, environ)

        if not configuration.enabled:
            self.logger.info("Plugin is configured to be disabled.")
            return None

        root = self.resolve_root(configuration, process, cwd)
        if root is None:
            return None

        self.repository = build_repository(
            configuration.discovery_config(root),
            process,
            logger=self.logger,
        )
        # Prepended so monorepo versions win over any other source
        host.repository_manager.prepend_repository(self.repository)
        return self.repository

    def resolve_root(
        self, configuration: PluginConfiguration, process: ProcessExecutor, cwd: Path
    ) -> Path | None:
        forced = configuration.forced_monorepo_root
        if forced is None:
            root = detect_monorepo_root(process, cwd)
            if root is None:
                self.logger.info(
                    "Plugin is disabled because no GIT root found in {dir} directory",
                    context={"dir": cwd.resolve()},
                )
                return None
            self.logger.info("Detected monorepo root: {dir}", context={"dir": root})
            return root

        self.logger.warning(
            "Forced monorepo root is {directory}.", context={"directory": forced}
        )
        root = Path(os.path.normpath(cwd / forced))
        if not (root / ".git").is_dir():
            self.logger.info(
                "Plugin is disabled because forced monorepo root does not seem "
                "to be a valid GIT root."
            )
            return None
        return root

    def on_command(self, *, prefer_lowest: bool = False) -> None:
        """React to a host command before it resolves dependencies."""
        if self.repository is None:
            return

        if shutil.which("git") is None:
            self.repository.disable(
                'Plugin is disabled because the "git" executable does not exist.'
            )
            return
        if prefer_lowest:
            self.repository.disable("Plugin is disabled on prefer-lowest installs.")
