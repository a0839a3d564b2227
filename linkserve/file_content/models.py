# linkserve/file_content/models.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .sinks import Sink


@dataclass(frozen=True)
class FileMetadata:
    exists: bool
    length: int
    # Taken from the directory entry itself (link node, not target).
    last_modified: Optional[datetime]


@dataclass(frozen=True)
class RangeRequest:
    path: str
    offset: int = 0
    count: Optional[int] = None  # None -> to end of file


@dataclass(frozen=True)
class ByteRange:
    """
    One byte range with concrete inclusive bounds. Suffix forms
    (`bytes=-n`) are normalized against the file length by parse_range.
    """
    start: int
    end: int


@dataclass
class FileResult:
    path: str
    media_type: Optional[str] = None
    filename: Optional[str] = None


@dataclass
class ResponseContext:
    sink: "Sink"
    cancel: Optional["CancellationToken"] = None
