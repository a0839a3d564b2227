# linkserve/file_content/store.py
from __future__ import annotations
import os
from pathlib import Path, PurePosixPath
from typing import Optional

import anyio

from linkserve.config import settings
from .metadata import resolve
from .models import FileResult
from .utils import guess_mime_from_path

def storage_root() -> Path:
    return Path(settings.files_storage_root or os.getcwd())

def _to_abs_path(file_path: str) -> Optional[Path]:
    rel = PurePosixPath(file_path)
    if not file_path or rel.is_absolute() or ".." in rel.parts:
        return None
    # No Path.resolve() here: that would follow the link we want to detect.
    return storage_root().joinpath(*rel.parts)

async def lookup(file_path: str) -> Optional[FileResult]:
    """Map a request path to a file under the storage root, or None."""
    abs_path = _to_abs_path(file_path)
    if abs_path is None:
        return None
    try:
        meta = await anyio.to_thread.run_sync(resolve, abs_path)
    except OSError:
        # dangling link
        return None
    if not meta.exists:
        return None
    return FileResult(
        path=str(abs_path),
        media_type=guess_mime_from_path(abs_path),
        filename=abs_path.name,
    )
