"""Manifest reading utilities."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

from .errors import ManifestParseError


def read_manifest(path: Path) -> tuple[dict[str, Any], bytes]:
    """Read and parse a JSON manifest.

    Returns:
        Tuple of (parsed document, raw file bytes).

    Raises:
        ManifestParseError: If the file is unreadable, is not valid JSON,
            or does not hold a JSON object.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ManifestParseError(path, exc.strerror or str(exc)) from exc

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(path, "expected a JSON object at the top level")
    return data, raw


def content_reference(raw: bytes) -> str:
    """Content hash used as dist reference when no commit is known."""
    return hashlib.sha1(raw).hexdigest()
