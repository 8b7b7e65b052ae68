"""Environment-driven defaults for fsutil helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_TEMP_DIR = "FSUTIL_TEMP_DIR"
ENV_DIR_MODE = "FSUTIL_DIR_MODE"
ENV_FILE_MODE = "FSUTIL_FILE_MODE"
ENV_JSON_INDENT = "FSUTIL_JSON_INDENT"


class Settings(BaseModel):
    temp_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    dir_mode: int = Field(default=0o775, ge=0, le=0o7777)
    file_mode: int = Field(default=0o664, ge=0, le=0o7777)
    json_indent: int = Field(default=4, ge=0)

    @field_validator("dir_mode", "file_mode", mode="before")
    @classmethod
    def _parse_octal(cls, value: Any) -> Any:
        # Permission modes come from the environment as octal text ("775", "0o775").
        if isinstance(value, str):
            text = value.strip().lower()
            if text.startswith("0o"):
                text = text[2:]
            try:
                return int(text, 8)
            except ValueError as exc:
                raise ValueError(f"invalid octal permission mode: {value!r}") from exc
        return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    raw = {
        "temp_root": env.get(ENV_TEMP_DIR),
        "dir_mode": env.get(ENV_DIR_MODE),
        "file_mode": env.get(ENV_FILE_MODE),
        "json_indent": env.get(ENV_JSON_INDENT),
    }
    return Settings(**{k: v for k, v in raw.items() if v not in (None, "")})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
