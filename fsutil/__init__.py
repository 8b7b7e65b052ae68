"""Small filesystem helpers: JSON files, path tests, renaming, sizes, temp paths."""

from . import dirs, files, jsonfile, paths, temp
from .config import Settings, get_settings, load_settings, reset_settings
from .errors import ContractError, OperationFailed
from .files import count_lines, format_size, is_readable, is_writable, prepare, rename, split_name
from .jsonfile import decode, decode_file, encode, encode_file, last_error
from .paths import check
from .result import OK, Failure, Ok, Result
from .temp import TempRegistry, cleanup, default_registry, register_path, temp_dir, temp_file

__all__ = [
    "OK",
    "ContractError",
    "Failure",
    "Ok",
    "OperationFailed",
    "Result",
    "Settings",
    "TempRegistry",
    "check",
    "cleanup",
    "count_lines",
    "decode",
    "decode_file",
    "default_registry",
    "dirs",
    "encode",
    "encode_file",
    "files",
    "format_size",
    "get_settings",
    "is_readable",
    "is_writable",
    "jsonfile",
    "last_error",
    "load_settings",
    "paths",
    "prepare",
    "register_path",
    "rename",
    "reset_settings",
    "split_name",
    "temp",
    "temp_dir",
    "temp_file",
]
