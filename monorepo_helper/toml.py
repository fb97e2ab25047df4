"""TOML reading utilities.

Uses tomlkit to read the ``[tool.monorepo-helper]`` settings table from a
root pyproject.toml, for monorepos that configure the helper there instead
of in the root manifest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit

TOOL_TABLE = "monorepo-helper"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file."""
    return tomlkit.parse(path.read_text())


def get_tool_settings(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Extract [tool.monorepo-helper] as plain Python values.

    Returns an empty dict if the table is missing.
    """
    table = doc.get("tool", {}).get(TOOL_TABLE)
    if table is None:
        return {}
    return dict(table.unwrap())


def read_tool_settings(root: Path) -> dict[str, Any]:
    """Read [tool.monorepo-helper] from root/pyproject.toml, if present."""
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    return get_tool_settings(load_pyproject(pyproject))
