"""Exceptions raised by fsutil helpers."""

from __future__ import annotations

from typing import Optional


class ContractError(ValueError):
    """Raised when a caller-supplied argument violates a helper's precondition."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter


class OperationFailed(RuntimeError):
    """Raised when a failed result is unwrapped."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail
