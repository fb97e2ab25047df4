"""Plugin configuration.

Settings come from the ``monorepo-helper`` table of the root manifest's
``extra`` section (or ``[tool.monorepo-helper]`` in pyproject.toml when
running standalone), then from environment variables, then from defaults.
A manifest value always wins over the environment.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError
from .manifest import read_manifest
from .models import DiscoveryConfig
from .toml import read_tool_settings

EXTRA_KEY = "monorepo-helper"
DEFAULT_MAX_DISCOVERY_DEPTH = 5

ENV_ENABLED = "MONOREPO_HELPER_ENABLED"
ENV_OFFLINE_MODE = "MONOREPO_HELPER_OFFLINE_MODE"
ENV_MAX_DISCOVERY_DEPTH = "MONOREPO_HELPER_MAX_DISCOVERY_DEPTH"
ENV_EXCLUDED_DIRECTORIES = "MONOREPO_HELPER_EXCLUDED_DIRECTORIES"
ENV_MONOREPO_ROOT = "MONOREPO_HELPER_MONOREPO_ROOT"

# Older root manifests spell the depth key without the "y".
LEGACY_DEPTH_KEY = "max-discover-depth"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class PluginConfiguration(BaseModel):
    """Value object holding the plugin's settings.

    Attributes:
        enabled: Whether the plugin registers its repository at all.
        offline_mode: Use local tags only, never contact the remote.
        max_discovery_depth: Deepest directory level searched for packages.
        excluded_directories: Directory names skipped during discovery.
        forced_monorepo_root: Monorepo root to use instead of detecting it.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    offline_mode: bool = False
    max_discovery_depth: int = DEFAULT_MAX_DISCOVERY_DEPTH
    excluded_directories: frozenset[str] = frozenset()
    forced_monorepo_root: str | None = None

    @classmethod
    def from_manifest(
        cls,
        root_manifest: Mapping[str, Any],
        environ: Mapping[str, str] | None = None,
    ) -> PluginConfiguration:
        """Build the configuration for a root manifest document."""
        extra = root_manifest.get("extra") or {}
        return cls.from_settings(extra.get(EXTRA_KEY) or {}, environ)

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any],
        environ: Mapping[str, str] | None = None,
    ) -> PluginConfiguration:
        """Build the configuration from a settings table and the environment.

        Raises:
            ConfigurationError: If a value cannot be interpreted.
        """
        env = os.environ if environ is None else environ

        def pick(key: str, env_name: str, *aliases: str) -> Any:
            for name in (key, *aliases):
                if settings.get(name) is not None:
                    return settings[name]
            return env.get(env_name)

        enabled = pick("enabled", ENV_ENABLED)
        offline = pick("offline-mode", ENV_OFFLINE_MODE)
        excluded = pick("excluded-directories", ENV_EXCLUDED_DIRECTORIES)
        root = pick("monorepo-root", ENV_MONOREPO_ROOT)

        return cls(
            enabled=True if enabled is None else to_bool(enabled, "enabled"),
            offline_mode=False if offline is None else to_bool(offline, "offline-mode"),
            max_discovery_depth=to_depth(
                pick(
                    "max-discovery-depth", ENV_MAX_DISCOVERY_DEPTH, LEGACY_DEPTH_KEY
                )
            ),
            excluded_directories=to_names(excluded),
            forced_monorepo_root=str(root) if root else None,
        )

    def discovery_config(self, monorepo_root: Path) -> DiscoveryConfig:
        """Settings for one discovery run rooted at monorepo_root."""
        return DiscoveryConfig(
            monorepo_root=monorepo_root,
            max_depth=self.max_discovery_depth,
            excluded_directory_names=self.excluded_directories,
            offline_mode=self.offline_mode,
        )


def to_bool(value: Any, name: str) -> bool:
    """Interpret a manifest or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def to_depth(value: Any) -> int:
    """Interpret the discovery depth; empty or non-positive means default."""
    if value is None or value == "":
        return DEFAULT_MAX_DISCOVERY_DEPTH
    try:
        depth = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid max-discovery-depth: {value!r}"
        ) from exc
    return depth if depth > 0 else DEFAULT_MAX_DISCOVERY_DEPTH


def to_names(value: Any) -> frozenset[str]:
    """Interpret excluded directories from a list or a comma separated string."""
    if value is None:
        return frozenset()
    items: Iterable[Any] = value.split(",") if isinstance(value, str) else value
    return frozenset(str(item).strip() for item in items if str(item).strip())


def read_root_settings(
    root: Path, manifest_name: str = "composer.json"
) -> dict[str, Any]:
    """Collect settings stored in the files of a monorepo root.

    The ``[tool.monorepo-helper]`` table of pyproject.toml is read first,
    keys from the root manifest's ``extra`` override it.
    """
    settings = read_tool_settings(root)
    manifest = root / manifest_name
    if manifest.is_file():
        data, _ = read_manifest(manifest)
        settings.update((data.get("extra") or {}).get(EXTRA_KEY) or {})
    return settings
