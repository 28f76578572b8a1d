import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from contracts.upload import FileCandidate
from client.state import Preview
from services.preview.thumbnail import make_thumbnail

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"


class PreviewSlot:
    """
    Holds the preview of the one active file.

    An image preview is a temporary thumbnail file addressed by a file:// URI.
    It is acquired when a file is shown and released when another file replaces
    it or the slot is closed; callers must not rely on garbage collection.
    """

    def __init__(self, workdir: Optional[str] = None):
        self._owns_workdir = workdir is None
        self._workdir = workdir or tempfile.mkdtemp(prefix="upload_preview_")
        self._current: Optional[Preview] = None
        self._current_path: Optional[str] = None

    @property
    def current(self) -> Optional[Preview]:
        return self._current

    def show(self, candidate: FileCandidate) -> Optional[Preview]:
        self.release()

        if candidate.mime_type.startswith("image/"):
            out_path = os.path.join(self._workdir, f"preview_{uuid.uuid4().hex}.jpg")
            try:
                with candidate.open() as src:
                    make_thumbnail(src, out_path)
            except (OSError, RuntimeError) as e:
                logger.warning("No image preview for %s: %s", candidate.name, e)
                self._current = Preview(kind="file", name=candidate.name, mime_type=candidate.mime_type)
                return self._current
            self._current_path = out_path
            self._current = Preview(
                kind="image",
                name=candidate.name,
                mime_type=candidate.mime_type,
                url=Path(out_path).resolve().as_uri(),
            )
        elif candidate.mime_type == PDF_MIME:
            self._current = Preview(kind="file", name=candidate.name, mime_type=candidate.mime_type)
        else:
            self._current = None
        return self._current

    def release(self) -> None:
        if self._current_path is not None:
            try:
                os.remove(self._current_path)
            except FileNotFoundError:
                pass
        self._current_path = None
        self._current = None

    def close(self) -> None:
        self.release()
        if self._owns_workdir:
            shutil.rmtree(self._workdir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
