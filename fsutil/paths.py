"""Bitmask-driven path tests shared by the file and directory helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .errors import ContractError
from .result import OK, Failure, Result

PathLike = Union[str, "os.PathLike[str]"]

EXISTS = 1
IS_FILE = 2
IS_DIR = 4
WRITABLE = 8
READABLE = 16
EXECUTABLE = 32

_ALL_FLAGS = EXISTS | IS_FILE | IS_DIR | WRITABLE | READABLE | EXECUTABLE


def as_path(path: PathLike, parameter: str = "path") -> Path:
    if isinstance(path, Path):
        return path
    if isinstance(path, (str, os.PathLike)):
        text = os.fspath(path)
        if not text:
            raise ContractError(f"invalid value provided for '{parameter}'; expecting a non-empty path", parameter)
        return Path(text)
    raise ContractError(
        f"invalid value provided for '{parameter}'; expecting a path as string or os.PathLike",
        parameter,
    )


def check(path: PathLike, mask: int) -> Result:
    """Check ``path`` against every flag set in ``mask``.

    Flags are checked in a fixed order (exists, file, directory, readable,
    writable, executable) and the first failing check is reported.
    """
    if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0 or mask & ~_ALL_FLAGS:
        raise ContractError(
            f"invalid value provided for 'mask'; expecting a combination of path test flags, got {mask!r}",
            "mask",
        )
    p = as_path(path)

    if mask & EXISTS and not p.exists():
        return Failure(f"'{p}' does not exist")
    if mask & IS_FILE and not p.is_file():
        return Failure(f"'{p}' is not a file")
    if mask & IS_DIR and not p.is_dir():
        return Failure(f"'{p}' is not a directory")
    if mask & READABLE and not os.access(p, os.R_OK):
        return Failure(f"'{p}' is not readable")
    if mask & WRITABLE and not os.access(p, os.W_OK):
        return Failure(f"'{p}' is not writable")
    if mask & EXECUTABLE and not os.access(p, os.X_OK):
        return Failure(f"'{p}' is not executable")
    return OK
