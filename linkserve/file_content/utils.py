# linkserve/file_content/utils.py
from __future__ import annotations
import mimetypes
import re
from pathlib import Path
from typing import Union

_DISP_SAFE_RE = re.compile(r'[\r\n"]')  # strip controls and quotes
_UNRESERVED = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")

def sanitize_filename(name: str) -> str:
    if not name:
        return "file"
    name = _DISP_SAFE_RE.sub("", name).strip()
    return name or "file"

def _percent_encode(b: bytes) -> str:
    return "".join(chr(c) if c in _UNRESERVED else f"%{c:02X}" for c in b)

def build_content_disposition(filename: str, attachment: bool) -> str:
    safe = sanitize_filename(filename)
    disp = "attachment" if attachment else "inline"
    filename_star = "UTF-8''" + _percent_encode(safe.encode("utf-8"))
    # ascii fallback for clients that ignore filename*
    ascii_name = safe.encode("ascii", "replace").decode("ascii")
    return f'{disp}; filename="{ascii_name}"; filename*={filename_star}'

def guess_mime_from_path(p: Union[str, Path], fallback: str = "application/octet-stream") -> str:
    mt, _ = mimetypes.guess_type(str(p))
    return mt or fallback
