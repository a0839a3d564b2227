# linkserve/file_content/metadata.py
"""
Directory-entry metadata that stays correct for symbolic links.

On some platforms the size reported for a link's directory entry is
the link node's own size (or zero, or stale), not the target's. For
links we therefore open the target and ask the open stream how long it
is; ordinary files use the stat size directly.
"""
from __future__ import annotations
import logging
import os
import stat
from datetime import datetime, timezone
from typing import Optional, Union

from .models import FileMetadata

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _lstat(path: PathLike) -> Optional[os.stat_result]:
    try:
        return os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return None


def _is_link_entry(st: os.stat_result) -> bool:
    if stat.S_ISLNK(st.st_mode):
        return True
    # Windows junctions and other reparse points
    attrs = getattr(st, "st_file_attributes", 0)
    return bool(attrs & stat.FILE_ATTRIBUTE_REPARSE_POINT)


def is_symbolic_link(path: PathLike) -> bool:
    """True if the directory entry at `path` is a link. Does not follow it."""
    st = _lstat(path)
    return st is not None and _is_link_entry(st)


def _stream_length(path: PathLike) -> int:
    with open(path, "rb") as f:
        return f.seek(0, os.SEEK_END)


def resolve(path: PathLike) -> FileMetadata:
    """
    Fresh metadata for `path`; nothing is cached between calls.

    A missing path is reported as `exists=False` rather than raised. A
    link whose target cannot be opened raises the `OSError` from open().
    """
    st = _lstat(path)
    if st is None:
        return FileMetadata(exists=False, length=0, last_modified=None)

    last_modified = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
    if _is_link_entry(st):
        length = _stream_length(path)
        log.debug("resolved link %s: entry size=%s stream size=%s", path, st.st_size, length)
        return FileMetadata(exists=True, length=length, last_modified=last_modified)

    return FileMetadata(
        exists=not stat.S_ISDIR(st.st_mode),
        length=st.st_size,
        last_modified=last_modified,
    )
