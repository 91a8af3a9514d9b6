"""Repository discovery under a directory tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import ScanError

logger = logging.getLogger(__name__)

# Build output, dependency and editor directories never hold repositories we care about
SKIP_DIRS = frozenset({
    "node_modules", ".vscode", ".idea", "target", "build", "dist",
    ".next", ".nuxt", "vendor", "__pycache__", ".cache", ".DS_Store",
})


def should_skip_dir(name: str) -> bool:
    return name in SKIP_DIRS


def scan_for_repositories(root: str | Path) -> list[str]:
    """Return absolute paths of git repositories under ``root``, in walk order.

    A directory holding a ``.git`` directory or file is a repository root;
    the walk does not descend into it.
    """
    try:
        root_path = Path(root).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise ScanError(f"cannot resolve directory {root}: {e}") from e
    if not root_path.is_dir():
        raise ScanError(f"not a directory: {root_path}")

    def on_error(err: OSError) -> None:
        if Path(err.filename or "") == root_path:
            raise ScanError(f"failed to scan directory {root_path}: {err}") from err
        logger.warning("Cannot access %s: %s", err.filename, err.strerror or err)

    repos: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error):
        if ".git" in dirnames or ".git" in filenames:
            repos.append(dirpath)
            dirnames[:] = []
            continue
        dirnames[:] = sorted(d for d in dirnames if not should_skip_dir(d))

    return repos
