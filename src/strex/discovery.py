"""File discovery -- walks the source tree and yields C# files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: set[str] = {".cs"}

# Version-control metadata only; build output folders are opt-in via skip_dirs.
SKIP_DIRS: set[str] = {".git", ".hg", ".svn"}


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Cannot list %s: %s", exc.filename, exc.strerror or exc)


def iter_source_files(
    root: Path,
    extensions: Iterable[str] | None = None,
    skip_dirs: Iterable[str] | None = None,
) -> Iterator[str]:
    """Yield files under *root* whose extension is in *extensions*.

    Paths are yielded **relative to root** using the platform separator,
    in a deterministic order (directories and files sorted by name).
    Directories named in *skip_dirs* are pruned at any depth; an empty
    *skip_dirs* disables pruning.  Unreadable directories are logged and
    skipped.
    """
    exts = {e.lower() for e in (DEFAULT_EXTENSIONS if extensions is None else extensions)}
    skip = SKIP_DIRS if skip_dirs is None else set(skip_dirs)
    root = root.resolve()

    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        # Prune excluded directories in-place so os.walk skips them.
        dirnames[:] = sorted(d for d in dirnames if d not in skip)

        rel_dir = os.path.relpath(dirpath, root)
        for fname in sorted(filenames):
            if os.path.splitext(fname)[1].lower() not in exts:
                continue
            yield fname if rel_dir == os.curdir else os.path.join(rel_dir, fname)
