# linkserve/file_content/errors.py
"""
Exceptions raised while serving file content.

Everything inherits from `FileContentError` so callers can catch the
whole family; the concrete classes also inherit the matching builtin
(`ValueError`, `OSError`) so generic handlers keep working.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class FileContentError(Exception):
    """Base exception for file content errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class RangeNotSatisfiableError(FileContentError, ValueError):
    """Raised when an offset/count window falls outside the file."""

    def __init__(self, param: str, value: Any, length: int):
        super().__init__(
            f"{param}={value} is out of range for a file of {length} bytes",
            context={"param": param, "value": value, "length": length},
        )
        self.param = param
        self.value = value
        self.length = length


class CopyError(FileContentError, OSError):
    """Raised when a read or write fails in the middle of a copy."""
    pass


class CopyCancelledError(FileContentError):
    """Raised when a copy stops because its token was cancelled."""
    pass
