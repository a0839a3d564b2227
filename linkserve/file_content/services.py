# linkserve/file_content/services.py
from __future__ import annotations
import re
from email.utils import formatdate
from typing import Dict, Optional

from .errors import RangeNotSatisfiableError
from .models import ByteRange, FileMetadata
from .utils import build_content_disposition

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*([0-9]*)\s*-\s*([0-9]*)\s*$", re.IGNORECASE)

def http_date(meta: FileMetadata) -> Optional[str]:
    if meta.last_modified is None:
        return None
    return formatdate(meta.last_modified.timestamp(), usegmt=True)

def parse_range(range_header: Optional[str], total: int) -> Optional[ByteRange]:
    """
    Parse a single `bytes=` range against a file of `total` bytes.

    Returns a normalized ByteRange (concrete inclusive start/end), or None
    when the header is absent, malformed or asks for several ranges, in
    which case the whole file is served. A well-formed range that selects
    nothing raises RangeNotSatisfiableError.
    """
    m = _RANGE_RE.match(range_header or "")
    if not m:
        return None
    start_s, end_s = m.group(1), m.group(2)
    if start_s == "" and end_s == "":
        return None

    if start_s == "":
        # suffix: last N bytes
        length = int(end_s)
        if length <= 0 or total == 0:
            raise RangeNotSatisfiableError("count", length, total)
        return ByteRange(start=max(total - length, 0), end=total - 1)

    start = int(start_s)
    if end_s != "" and int(end_s) < start:
        return None
    if start >= total:
        raise RangeNotSatisfiableError("offset", start, total)
    end = total - 1 if end_s == "" else min(int(end_s), total - 1)
    return ByteRange(start=start, end=end)

def range_length(byte_range: Optional[ByteRange]) -> int:
    if byte_range is None:
        return 0
    return byte_range.end - byte_range.start + 1

def build_headers(
    meta: FileMetadata,
    byte_range: Optional[ByteRange],
    *,
    filename: Optional[str] = None,
    download: bool = False,
) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    headers["Accept-Ranges"] = "bytes"
    if byte_range is not None:
        headers["Content-Length"] = str(range_length(byte_range))
        headers["Content-Range"] = f"bytes {byte_range.start}-{byte_range.end}/{meta.length}"
    else:
        headers["Content-Length"] = str(meta.length)
    last_modified = http_date(meta)
    if last_modified:
        headers["Last-Modified"] = last_modified
    if filename:
        headers["Content-Disposition"] = build_content_disposition(filename, download)
    headers["X-Content-Type-Options"] = "nosniff"
    return headers
