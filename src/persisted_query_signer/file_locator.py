"""File locator - finds generated descriptor files under a root directory."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from .config import GRAPHQL_SUFFIX
from .errors import MissingInputError

logger = logging.getLogger(__name__)


def _walk_error(error: OSError) -> None:
    logger.debug("Skipping unreadable directory %s: %s", error.filename, error)


def locate_files(root: Path, suffix: str = GRAPHQL_SUFFIX) -> Iterator[Path]:
    """
    Recursively yield regular files under root whose name ends with suffix.

    Symbolic links are followed. Entries that cannot be read (permission
    denied, broken links) are skipped without stopping the walk.

    Args:
        root: Directory to scan
        suffix: Literal file name suffix to match

    Yields:
        Paths of matching files
    """
    root = Path(root)
    if not root.is_dir():
        raise MissingInputError(f"Directory not found: {root}")

    # Real paths of the directories on the current branch, keyed by depth
    ancestors: dict[int, str] = {}
    root_depth = len(root.parts)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error, followlinks=True):
        depth = len(Path(dirpath).parts) - root_depth
        for stale in [d for d in ancestors if d >= depth]:
            del ancestors[stale]

        # A symlink back to an ancestor is a cycle
        real = os.path.realpath(dirpath)
        if real in ancestors.values():
            logger.debug("Skipping symlink cycle at %s", dirpath)
            dirnames.clear()
            continue
        ancestors[depth] = real

        for filename in sorted(filenames):
            if not filename.endswith(suffix):
                continue

            file_path = Path(dirpath) / filename
            try:
                mode = os.stat(file_path).st_mode
            except OSError as e:
                logger.debug("Skipping %s: %s", file_path, e)
                continue

            if stat.S_ISREG(mode):
                yield file_path
