"""
Scratch-directory storage for uploaded files.

Architectural role:
- Persist each uploaded part under a random name so concurrent requests
  never collide.
- Track every path a request wrote and remove all of them when the request
  scope exits, whatever the outcome.

Side effects:
- `ensure_upload_dir` creates the scratch directory (server layer only).
- `save_upload` writes one file; `TransientFiles` deletes them.

Usage:
    Callers register a path with `TransientFiles.track` before writing to it,
    so a write that fails halfway is still cleaned up.

Error handling strategy:
- Removing a path that is already gone is not an error.
- Other removal failures are logged and do not stop cleanup of the
  remaining paths.
"""

import logging
import os
import uuid
from typing import Iterable, List, Optional

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from askdoc.core.content_types import UploadedFile


logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
)
UPLOAD_DIR = os.path.realpath(
    os.getenv("UPLOAD_DIR", os.path.join(PROJECT_ROOT, "uploads"))
)
DEFAULT_MEDIA_TYPE = "application/octet-stream"


def ensure_upload_dir(directory: str = UPLOAD_DIR) -> str:
    """Create the scratch directory if needed and return its real path."""
    os.makedirs(directory, exist_ok=True)
    return os.path.realpath(directory)


def new_upload_path(directory: str = UPLOAD_DIR) -> str:
    """Return a fresh, collision-free path inside `directory`."""
    return os.path.join(directory, uuid.uuid4().hex)


def _write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


async def save_upload(upload: UploadFile, path: str) -> UploadedFile:
    """Write one multipart upload to `path` off the event loop."""
    data = await upload.read()
    await run_in_threadpool(_write_bytes, path, data)

    return UploadedFile(
        media_type=upload.content_type or DEFAULT_MEDIA_TYPE,
        filename=upload.filename or os.path.basename(path),
        path=path,
    )


class TransientFiles:
    """
    Context manager owning the transient files of one request.

    Paths are registered with `track` as they are written. On exit every
    tracked path is removed exactly once, whether the block returned or
    raised. `close` may be called repeatedly.
    """

    def __init__(self, paths: Optional[Iterable[str]] = None):
        self.paths: List[str] = list(paths or [])
        self.removed: List[str] = []
        self._closed = False

    def track(self, path: str) -> str:
        self.paths.append(path)
        return path

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        for path in self.paths:
            try:
                os.remove(path)
            except FileNotFoundError:
                logger.debug("Transient file already removed: %s", path)
                continue
            except OSError:
                logger.exception("Failed to remove transient file %s", path)
                continue
            self.removed.append(path)

    def __enter__(self) -> "TransientFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
