"""Directory permission tests, creation and removal."""

from __future__ import annotations

import logging
import shutil
from typing import Optional

from .config import get_settings
from .paths import EXISTS, IS_DIR, READABLE, WRITABLE, PathLike, as_path, check
from .result import OK, Failure, Result

logger = logging.getLogger(__name__)

DIR_READABLE = EXISTS | IS_DIR | READABLE
DIR_WRITABLE = EXISTS | IS_DIR | WRITABLE


def is_readable(path: PathLike) -> Result:
    return check(path, DIR_READABLE)


def is_writable(path: PathLike) -> Result:
    """Test whether ``path`` is (or could be created as) a writable directory.

    A missing directory is judged by its nearest existing ancestor.
    """
    p = as_path(path)
    if p.exists():
        return check(p, DIR_WRITABLE)
    parent = p.parent
    if parent == p:
        return Failure(f"'{p}' does not exist")
    return is_writable(parent)


def prepare(path: PathLike, mode: Optional[int] = None) -> Result:
    """Make sure ``path`` exists as a writable directory, creating it if needed."""
    p = as_path(path)
    if p.exists():
        return check(p, DIR_WRITABLE)

    test = is_writable(p)
    if not test:
        return test

    dir_mode = get_settings().dir_mode if mode is None else mode
    missing = [p]
    missing.extend(parent for parent in p.parents if not parent.exists())
    # Created top-down so every new directory in the chain gets dir_mode.
    for directory in reversed(missing):
        try:
            directory.mkdir(mode=dir_mode, exist_ok=True)
        except OSError as exc:
            return Failure(f"failed to create directory '{directory}'", detail=str(exc))
    logger.debug("created directory %s (mode %o)", p, dir_mode)
    return OK


def remove(path: PathLike) -> Result:
    p = as_path(path)
    if not p.is_dir() or p.is_symlink():
        return Failure(f"'{p}' is not a directory")
    try:
        shutil.rmtree(p)
    except OSError as exc:
        return Failure(f"failed to remove directory '{p}'", detail=str(exc))
    return OK
