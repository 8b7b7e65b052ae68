from __future__ import annotations

import atexit
from pathlib import Path

import pytest

import fsutil as fs
from fsutil import temp


def test_file_and_dir_are_created_under_root(temp_root: Path) -> None:
    registry = fs.TempRegistry()

    path = registry.file("prefix-", "some contents")
    assert path.parent == temp_root
    assert path.name.startswith("prefix-")
    assert path.read_text(encoding="utf-8") == "some contents"

    empty = registry.file()
    assert empty.read_bytes() == b""

    directory = registry.dir("work")
    assert directory.is_dir()
    assert directory.parent == temp_root
    assert directory.name.startswith("work")
    assert len(directory.name) == len("work") + 6

    assert len(registry) == 3
    assert path in registry
    assert str(directory) in registry
    assert registry.cleanup()


def test_dir_retries_taken_names(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "tmpaaaaaa").mkdir()
    suffixes = iter(["aaaaaa", "aaaaaa", "bbbbbb"])
    monkeypatch.setattr(temp.secrets, "token_hex", lambda n: next(suffixes))

    registry = fs.TempRegistry(tmp_path)
    assert registry.dir("tmp") == tmp_path / "tmpbbbbbb"
    registry.cleanup()


def test_cleanup_removes_everything_and_is_idempotent(tmp_path: Path) -> None:
    registry = fs.TempRegistry(tmp_path)
    created = [registry.file(contents=b"\x00\x01") for _ in range(3)]
    created += [registry.dir() for _ in range(2)]
    (created[-1] / "nested").mkdir()
    (created[-1] / "nested" / "file.txt").write_text("x", encoding="utf-8")

    external = tmp_path / "registered-elsewhere"
    external.mkdir()
    registry.register_path(external)

    result = registry.cleanup()
    assert result
    assert result.ok
    assert not any(p.exists() for p in created)
    assert not external.exists()
    assert len(registry) == 0

    assert registry.cleanup()


def test_cleanup_skips_paths_already_gone(tmp_path: Path) -> None:
    registry = fs.TempRegistry(tmp_path)
    path = registry.file()
    path.unlink()
    assert registry.cleanup()


def test_cleanup_continues_past_failures(tmp_path: Path) -> None:
    registry = fs.TempRegistry(tmp_path)
    plain = tmp_path / "plain.txt"
    plain.write_text("x", encoding="utf-8")
    # Registered as a directory, so removal fails.
    registry.register_path(plain, is_dir=True)
    other = registry.file()

    result = registry.cleanup()
    assert isinstance(result, fs.Failure)
    assert str(plain) in result.message
    assert not other.exists()
    assert plain.exists()


def test_scoped_resources_released_on_error(tmp_path: Path) -> None:
    registry = fs.TempRegistry(tmp_path)

    with pytest.raises(RuntimeError):
        with registry.scoped_file(contents="data") as path:
            assert path.exists()
            raise RuntimeError("boom")
    assert not path.exists()
    assert path not in registry

    with registry.scoped_dir() as directory:
        (directory / "child.txt").write_text("x", encoding="utf-8")
    assert not directory.exists()
    assert len(registry) == 0


def test_registry_context_manager(tmp_path: Path) -> None:
    with fs.TempRegistry(tmp_path) as registry:
        path = registry.file()
        directory = registry.dir()
    assert not path.exists()
    assert not directory.exists()


def test_atexit_hook_registered_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    hooks = []
    monkeypatch.setattr(atexit, "register", hooks.append)

    registry = fs.TempRegistry(tmp_path, register_atexit=True)
    registry.file()
    registry.dir()
    assert hooks == [registry.cleanup]

    plain = fs.TempRegistry(tmp_path)
    plain.file()
    assert len(hooks) == 1

    registry.cleanup()
    plain.cleanup()


def test_default_registry_helpers(temp_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(temp, "_default", None)
    monkeypatch.setattr(atexit, "register", lambda fn: fn)

    path = fs.temp_file("default-", "x")
    directory = fs.temp_dir("default")
    assert path.parent == temp_root
    assert fs.default_registry() is temp.default_registry()
    assert fs.default_registry().register_atexit is True
    assert path in fs.default_registry()

    extra = temp_root / "extra.txt"
    extra.write_text("x", encoding="utf-8")
    fs.register_path(extra, False)

    assert fs.cleanup()
    assert not path.exists()
    assert not directory.exists()
    assert not extra.exists()
