"""JSON encode/decode helpers that read and write files."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from typing import Any, Dict, Optional, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match

from . import files
from .config import get_settings
from .errors import ContractError
from .paths import PathLike, as_path
from .result import OK, Failure, Ok, Result

logger = logging.getLogger(__name__)

# Decoded documents must be an object or an array unless the caller says otherwise.
CONTAINER: Dict[str, Any] = {"type": ["object", "array"]}
OBJECT: Dict[str, Any] = {"type": "object"}
ARRAY: Dict[str, Any] = {"type": "array"}

NO_ERROR = "no error"
SYNTAX_ERROR = "syntax error"
CONTROL_CHARACTER_ERROR = "control character error, possibly incorrectly encoded"
UTF8_ERROR = "malformed UTF-8 characters, possibly incorrectly encoded"
DEPTH_ERROR = "maximum stack depth exceeded"

_last_error = NO_ERROR


def last_error() -> str:
    """Short description of the most recent decode outcome in this module.

    Prefer ``Failure.detail`` on the result returned by :func:`decode` or
    :func:`decode_file`; this exists for callers that poll after the fact.
    """
    return _last_error


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, RecursionError):
        return DEPTH_ERROR
    if isinstance(exc, UnicodeDecodeError):
        return UTF8_ERROR
    if isinstance(exc, json.JSONDecodeError) and exc.msg.startswith("Invalid control character"):
        return CONTROL_CHARACTER_ERROR
    return SYNTAX_ERROR


def encode(value: Any, human: bool = False, indent: Optional[int] = None) -> str:
    """Serialise ``value``.

    ``human`` output is pretty-printed and keeps non-ASCII characters (and
    forward slashes) literal; otherwise the output is compact and ASCII-only.
    """
    try:
        if human:
            return json.dumps(
                value,
                ensure_ascii=False,
                allow_nan=False,
                indent=get_settings().json_indent if indent is None else indent,
            )
        return json.dumps(value, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ContractError(f"invalid value provided for 'value'; {exc}", "value") from exc


def encode_file(path: PathLike, value: Any, human: bool = False) -> Result:
    """Write ``value`` as JSON to ``path``.

    The document is written to a temporary file next to ``path`` and moved
    into place, so readers never observe a partial document.
    """
    p = as_path(path)
    text = encode(value, human=human) + "\n"
    test = files.prepare(p)
    if not test:
        return test

    existed = p.exists()
    tmp_name: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=p.parent,
            prefix=f".{p.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        if existed:
            shutil.copymode(p, tmp_name)
        else:
            os.chmod(tmp_name, get_settings().file_mode)
        os.replace(tmp_name, p)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return Failure(f"failed to write JSON to '{p}'", detail=str(exc))

    logger.debug("wrote %d bytes of JSON to %s", len(text), p)
    return OK


def _check_schema(value: Any, schema: Dict[str, Any]) -> None:
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        raise ContractError(f"invalid value provided for 'schema'; {exc.message}", "schema") from exc

    error = best_match(Draft202012Validator(schema).iter_errors(value))
    if error is not None:
        expected = schema.get("type", "a value matching the schema")
        if isinstance(expected, list):
            expected = " or ".join(expected)
        raise ContractError(
            f"decoded JSON does not match 'schema'; expecting {expected}: {error.message}",
            "schema",
        )


def decode(text: Union[str, bytes], schema: Optional[Dict[str, Any]] = CONTAINER) -> Result:
    """Parse JSON ``text``; the decoded value is carried by the ``Ok`` result.

    Malformed input is an environment failure and yields ``Failure``. A value
    that does not satisfy ``schema`` is a caller error and raises
    :class:`ContractError`. Pass ``schema=None`` to accept any JSON value.
    """
    global _last_error
    try:
        value = json.loads(text)
    except (ValueError, RecursionError) as exc:
        _last_error = describe_error(exc)
        return Failure(f"failed to decode JSON: {_last_error}", detail=_last_error)
    _last_error = NO_ERROR

    if schema is not None:
        _check_schema(value, schema)
    return Ok(value)


def decode_file(path: PathLike, schema: Optional[Dict[str, Any]] = CONTAINER) -> Result:
    p = as_path(path)
    test = files.is_readable(p)
    if not test:
        return test
    try:
        raw = p.read_bytes()
    except OSError as exc:
        return Failure(f"failed to read '{p}'", detail=str(exc))

    result = decode(raw, schema)
    if not result:
        return Failure(f"failed to decode JSON in '{p}': {result.detail}", detail=result.detail)
    return result
