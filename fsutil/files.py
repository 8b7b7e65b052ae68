"""File permission tests, renaming, and inspection helpers."""

from __future__ import annotations

import logging
import os
import shutil
from typing import Optional, Tuple, Union

from . import dirs, paths
from .errors import ContractError
from .paths import PathLike, as_path, check
from .result import OK, Failure, Result

logger = logging.getLogger(__name__)

KILOBYTE = 1024
MEGABYTE = KILOBYTE**2
GIGABYTE = KILOBYTE**3
TERABYTE = KILOBYTE**4

READABLE = paths.EXISTS | paths.IS_FILE | paths.READABLE
WRITABLE = paths.EXISTS | paths.IS_FILE | paths.WRITABLE
READABLE_WRITABLE = READABLE | WRITABLE
EXECUTABLE = paths.EXISTS | paths.IS_FILE | paths.EXECUTABLE

SIZE_UNITS = ("bytes", "KB", "MB", "GB", "TB", "PB", "EB")


def is_readable(path: PathLike) -> Result:
    return check(path, READABLE)


def is_writable(path: PathLike) -> Result:
    """Test whether ``path`` can be written.

    For a path that does not exist yet, the parent directories are analysed.
    """
    p = as_path(path)
    if not p.exists():
        return dirs.is_writable(p.parent)
    return check(p, WRITABLE)


def prepare(path: PathLike, dir_mode: Optional[int] = None) -> Result:
    """Prepare ``path`` for writing, creating its parent directories if needed."""
    p = as_path(path)
    if p.exists():
        return check(p, WRITABLE)
    return dirs.prepare(p.parent, dir_mode)


def rename(
    src: PathLike,
    dst: PathLike,
    file_mode: Optional[int] = 0o664,
    dir_mode: Optional[int] = None,
) -> Result:
    """Move ``src`` to ``dst``, preparing the destination and applying ``file_mode``.

    The first step to fail short-circuits the rest and its message is returned.
    ``file_mode=None`` leaves the permissions of the moved file untouched.
    """
    src_path = as_path(src, "src")
    dst_path = as_path(dst, "dst")

    test = check(src_path, READABLE_WRITABLE)
    if not test:
        return test
    test = prepare(dst_path, dir_mode)
    if not test:
        return test

    try:
        shutil.move(os.fspath(src_path), os.fspath(dst_path))
    except OSError as exc:
        return Failure(f"failed to move '{src_path}' to '{dst_path}'", detail=str(exc))

    if file_mode is not None:
        try:
            os.chmod(dst_path, file_mode)
        except OSError as exc:
            return Failure(
                f"failed to set permissions for '{dst_path}' to '{file_mode:o}'",
                detail=str(exc),
            )
    logger.debug("moved %s to %s", src_path, dst_path)
    return OK


def split_name(path: PathLike) -> Tuple[str, Optional[str]]:
    """Separate a filename and extension.

    >>> split_name("/path/to/file.txt")
    ('file', 'txt')
    >>> split_name("/path/.hidden")
    ('.hidden', None)

    A separator in first position is stripped too, so ``"/file.txt"`` gives
    ``("file", "txt")`` rather than ``("/file", "txt")``.
    """
    name = path if isinstance(path, str) else os.fspath(as_path(path))
    name = name.rpartition("/")[2]
    if os.sep != "/":
        name = name.rpartition(os.sep)[2]

    pos = name.rfind(".")
    if pos <= 0:
        return name, None
    return name[:pos], name[pos + 1 :]


def _size_in_bytes(value: Union[int, str, PathLike]) -> int:
    invalid = ContractError(
        "invalid value provided for 'bytes'; expecting an integer or a file path",
        "bytes",
    )
    if isinstance(value, bool):
        raise invalid
    if isinstance(value, int):
        if value < 0:
            raise invalid
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    if isinstance(value, (str, os.PathLike)):
        p = as_path(value, "bytes")
        if p.is_file():
            return p.stat().st_size
    raise invalid


def format_size(value: Union[int, str, PathLike], precision: int = 2) -> str:
    """Get a human readable file size.

    ``value`` is either a byte count (an int or a string of digits) or a path
    to an existing file.
    """
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
        raise ContractError(
            "invalid value provided for 'precision'; expecting a non-negative integer",
            "precision",
        )

    size = _size_in_bytes(value)
    i = 0
    while size >= KILOBYTE ** (i + 1) and i < len(SIZE_UNITS) - 1:
        i += 1
    try:
        scaled = size / KILOBYTE**i
    except OverflowError as exc:
        raise ContractError(
            "invalid value provided for 'bytes'; too large to format", "bytes"
        ) from exc
    return f"{scaled:.{precision}f} {SIZE_UNITS[i]}"


def count_lines(path: PathLike) -> int:
    """Count the lines in a file without reading its contents into memory."""
    p = as_path(path)
    try:
        fh = p.open("rb")
    except OSError as exc:
        raise OSError(exc.errno, f"failed to open file: {p}") from exc
    with fh:
        return sum(1 for _ in fh)
