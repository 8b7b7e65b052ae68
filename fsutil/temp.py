"""Temporary files and directories removed when their owner is done with them."""

from __future__ import annotations

import atexit
import logging
import os
import secrets
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from . import dirs
from .config import get_settings
from .paths import PathLike, as_path
from .result import OK, Failure, Result

logger = logging.getLogger(__name__)


class TempRegistry:
    """Tracks temp paths and removes all of them in a single cleanup pass.

    Entries map a path to whether it is a directory; ``None`` means the kind
    is detected from the filesystem at cleanup time.
    """

    def __init__(self, root: Optional[PathLike] = None, register_atexit: bool = False):
        self.root = as_path(root, "root") if root is not None else None
        self.register_atexit = register_atexit
        self._entries: Dict[Path, Optional[bool]] = {}
        self._lock = threading.Lock()
        self._hooked = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        with self._lock:
            return Path(path) in self._entries

    def __enter__(self) -> "TempRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def _root(self) -> Path:
        return self.root if self.root is not None else get_settings().temp_root

    def paths(self) -> List[Path]:
        with self._lock:
            return list(self._entries)

    def register_path(self, path: PathLike, is_dir: Optional[bool] = None) -> None:
        p = as_path(path)
        with self._lock:
            if self.register_atexit and not self._hooked:
                atexit.register(self.cleanup)
                self._hooked = True
            self._entries[p] = is_dir

    def _forget(self, path: Path) -> None:
        with self._lock:
            self._entries.pop(path, None)

    def file(self, prefix: str = "temp-", contents: Union[str, bytes, None] = None) -> Path:
        """Create a uniquely named temp file, optionally with ``contents``."""
        fd, name = tempfile.mkstemp(prefix=prefix, dir=self._root())
        path = Path(name)
        self.register_path(path, False)
        with os.fdopen(fd, "wb") as fh:
            if contents:
                fh.write(contents.encode("utf-8") if isinstance(contents, str) else contents)
        logger.debug("created temp file %s", path)
        return path

    def dir(self, prefix: str = "temp") -> Path:
        """Create a temp directory named ``prefix`` plus a short random suffix."""
        root = self._root()
        while True:
            path = root / f"{prefix}{secrets.token_hex(3)}"
            try:
                path.mkdir()
            except FileExistsError:
                continue
            break
        self.register_path(path, True)
        logger.debug("created temp directory %s", path)
        return path

    @contextmanager
    def scoped_file(
        self, prefix: str = "temp-", contents: Union[str, bytes, None] = None
    ) -> Iterator[Path]:
        path = self.file(prefix, contents)
        try:
            yield path
        finally:
            self._release(path, False)

    @contextmanager
    def scoped_dir(self, prefix: str = "temp") -> Iterator[Path]:
        path = self.dir(prefix)
        try:
            yield path
        finally:
            self._release(path, True)

    def _release(self, path: Path, is_dir: Optional[bool]) -> None:
        self._forget(path)
        result = _remove(path, is_dir)
        if not result:
            logger.warning("failed to remove temp path %s: %s", path, result.detail or result.message)

    def cleanup(self) -> Result:
        """Remove every registered path.

        Every entry is attempted even when some removals fail; the result is
        ``Ok`` only if all of them succeeded. The registry is drained, so a
        second call does nothing.
        """
        with self._lock:
            entries = list(self._entries.items())
            self._entries.clear()

        failed: List[str] = []
        for path, is_dir in entries:
            result = _remove(path, is_dir)
            if not result:
                logger.warning("failed to remove temp path %s: %s", path, result.detail or result.message)
                failed.append(str(path))
            else:
                logger.debug("removed temp path %s", path)

        if failed:
            return Failure(f"failed to remove {len(failed)} temp path(s): {', '.join(failed)}")
        return OK


def _remove(path: Path, is_dir: Optional[bool]) -> Result:
    if not os.path.lexists(path):
        return OK
    if is_dir is None:
        is_dir = path.is_dir() and not path.is_symlink()
    if is_dir:
        return dirs.remove(path)
    try:
        path.unlink()
    except OSError as exc:
        return Failure(f"failed to remove '{path}'", detail=str(exc))
    return OK


_default: Optional[TempRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> TempRegistry:
    """Process-wide registry whose paths are removed at interpreter exit."""
    global _default
    with _default_lock:
        if _default is None:
            _default = TempRegistry(register_atexit=True)
        return _default


def temp_file(prefix: str = "temp-", contents: Union[str, bytes, None] = None) -> Path:
    return default_registry().file(prefix, contents)


def temp_dir(prefix: str = "temp") -> Path:
    return default_registry().dir(prefix)


def register_path(path: PathLike, is_dir: Optional[bool] = None) -> None:
    default_registry().register_path(path, is_dir)


def cleanup() -> Result:
    return default_registry().cleanup()
