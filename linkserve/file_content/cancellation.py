# linkserve/file_content/cancellation.py
"""
Cooperative cancellation for in-flight copies.

The copy loop calls `token.check()` at every chunk boundary, so a
cancelled transfer stops after at most one buffer.
"""
from __future__ import annotations
from dataclasses import dataclass

from .errors import CopyCancelledError


@dataclass
class CancellationToken:
    """
    Usage:
        token = CancellationToken()
        await send_range(path, sink, 0, None, cancel=token)
        # elsewhere, e.g. on client disconnect:
        token.cancel()
    """

    reason: str = "copy cancelled"
    _cancelled: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def check(self) -> None:
        """Raise CopyCancelledError if cancel() has been called."""
        if self._cancelled:
            raise CopyCancelledError(self.reason)
