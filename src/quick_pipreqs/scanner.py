"""Depth-limited discovery of directories holding a requirements.txt file."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Union

from quick_pipreqs.config import MARKER_FILE
from quick_pipreqs.errors import ScanError

logger = logging.getLogger(__name__)


def resolve_root(root: Union[str, Path]) -> Path:
    """
    Return the absolute root path, checking it is an existing directory.

    Raises:
        ScanError: If the path does not exist, cannot be accessed or is not
            a directory
    """
    root_abs = Path(os.path.abspath(root))
    try:
        st = os.stat(root_abs)
    except FileNotFoundError:
        raise ScanError(f"path does not exist: {root_abs}") from None
    except OSError as e:
        raise ScanError(f"cannot access {root_abs}: {e.strerror or e}") from e
    if not stat.S_ISDIR(st.st_mode):
        raise ScanError(f"path is not a directory: {root_abs}")
    return root_abs


def find_requirements_dirs(root: Union[str, Path], max_depth: int) -> list[Path]:
    """
    Find directories under ``root`` that directly contain the marker file.

    A directory's depth is its level below root (root itself is 0). Directories
    deeper than ``max_depth`` are pruned before they are listed, so nothing in
    their subtree is visited. A negative ``max_depth`` disables the limit.
    Symlinked directories are not followed.

    Args:
        root: Directory to walk
        max_depth: Deepest directory level to inspect

    Returns:
        Deduplicated absolute directory paths, in walk order (callers sort)

    Raises:
        ScanError: On a bad root or any traversal error; the scan is aborted
    """
    root_abs = resolve_root(root)
    logger.debug(f"Scanning {root_abs} (max_depth={max_depth})")

    def on_error(err: OSError) -> None:
        raise ScanError(f"error walking {err.filename}: {err.strerror or err}") from err

    matched: list[Path] = []
    seen: set[str] = set()

    for dirpath, dirnames, filenames in os.walk(root_abs, onerror=on_error):
        level = _depth(root_abs, dirpath)

        if max_depth >= 0 and level >= max_depth:
            # children would be deeper than the limit
            dirnames[:] = []

        if not any(name.lower() == MARKER_FILE for name in filenames):
            continue

        key = os.path.realpath(dirpath)
        if key in seen:
            continue
        seen.add(key)
        matched.append(Path(dirpath))

    logger.debug(f"Found {len(matched)} directories with {MARKER_FILE}")
    return matched


def _depth(root: Path, dirpath: str) -> int:
    rel = os.path.relpath(dirpath, root)
    if rel == ".":
        return 0
    return rel.count(os.sep) + 1
