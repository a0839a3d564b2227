# linkserve/file_content/__init__.py
"""
File content (one-home module)

Serves a single local file as a response body. Symbolic links get their
length from the target itself, and range requests copy an exact byte
window through a fixed-size buffer.
"""

from .cancellation import CancellationToken  # noqa: F401
from .copier import send_range  # noqa: F401
from .errors import (  # noqa: F401
    CopyCancelledError,
    CopyError,
    FileContentError,
    RangeNotSatisfiableError,
)
from .metadata import is_symbolic_link, resolve  # noqa: F401
from .models import ByteRange, FileMetadata, FileResult, RangeRequest, ResponseContext  # noqa: F401
from .responders import (  # noqa: F401
    DefaultFileResponder,
    FileResponder,
    SymlinkFollowingFileResponder,
    select_responder,
)
from .response import LinkAwareFileResponse  # noqa: F401
from .routes import register, router  # noqa: F401
