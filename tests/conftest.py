from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import fsutil as fs  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch):
    temp_root = tmp_path_factory.mktemp("temp_root")
    monkeypatch.setenv("FSUTIL_TEMP_DIR", str(temp_root))
    for name in ("FSUTIL_DIR_MODE", "FSUTIL_FILE_MODE", "FSUTIL_JSON_INDENT"):
        monkeypatch.delenv(name, raising=False)
    fs.reset_settings()
    yield temp_root
    fs.reset_settings()


@pytest.fixture
def temp_root(isolated_settings: Path) -> Path:
    return isolated_settings


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.txt"
    path.write_text("one\ntwo\nthree\n", encoding="utf-8")
    return path
