"""Sub-project discovery.

Walks the monorepo and yields the directory of every manifest file, so
packages can be offered to the resolver without being published anywhere.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

MANIFEST_NAME = "composer.json"
VENDOR_DIR = "vendor"


def discover_package_roots(
    root: Path,
    max_depth: int,
    excluded: Iterable[str] = (),
    manifest_name: str = MANIFEST_NAME,
) -> Iterator[Path]:
    """Yield every directory under root that contains a manifest.

    The walk is lazy and top-down. Directory names are visited in sorted
    order, so the output is stable for an unchanged tree.

    Args:
        root: Directory to start from.
        max_depth: Deepest directory level searched; 0 means only root.
        excluded: Directory names that are never entered, on top of the
                  vendor directory.
        manifest_name: File name that marks a package directory.
    """
    pruned = {VENDOR_DIR, *excluded}
    root = Path(root)

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts)

        # Prune in place so os.walk never descends into these
        if depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if d not in pruned)

        if manifest_name in filenames:
            yield current
