"""Success/failure results for operations that depend on the environment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .errors import OperationFailed


@dataclass(frozen=True, slots=True)
class Ok:
    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """An environment failure with a human-readable message.

    ``detail`` carries the underlying cause (an OS error string, or the short
    JSON decoder error) when one is known.
    """

    message: str
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.message

    def unwrap(self) -> Any:
        raise OperationFailed(self.message, self.detail)


Result = Union[Ok, Failure]

OK = Ok()
