"""
Field names, limits and response shapes shared by the upload form and the
upload endpoint.
"""
import io
import mimetypes
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

FILE_FIELD = "file"
NAME_FIELD = "name"

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB

ACCEPTED_FILE_TYPES = frozenset({"image/jpeg", "image/png", "application/pdf"})

API_PREFIX = "/api"
UPLOAD_ROUTE = "/upload"
UPLOAD_PATH = API_PREFIX + UPLOAD_ROUTE

# fixed directory under the public root; files are served back from the same name
UPLOAD_SUBDIR = "uploads"
PUBLIC_UPLOAD_PREFIX = "/" + UPLOAD_SUBDIR

MSG_NAME_REQUIRED = "Name is required"
MSG_FILE_REQUIRED = "File is required"
MSG_FILE_TOO_LARGE = "File size must be less than 5MB"
MSG_FILE_TYPE = "Only JPEG, PNG, and PDF files are accepted"

MSG_UPLOADED = "File uploaded successfully"
MSG_NO_FILE = "No file uploaded"
MSG_UPLOAD_ERROR = "Error uploading file: {detail}"
MSG_UPLOAD_FAILED = "Upload failed"


@dataclass(frozen=True)
class FileCandidate:
    """A file the user picked: what a browser exposes as File."""

    name: str
    mime_type: str
    size_bytes: int
    path: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path: str) -> "FileCandidate":
        # type comes from the extension, as a browser's File.type does
        mime, _ = mimetypes.guess_type(path)
        return cls(
            name=os.path.basename(path),
            mime_type=mime or "",
            size_bytes=os.path.getsize(path),
            path=path,
        )

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: Optional[str] = None) -> "FileCandidate":
        if mime_type is None:
            mime_type = mimetypes.guess_type(name)[0] or ""
        return cls(name=name, mime_type=mime_type, size_bytes=len(data), data=data)

    def open(self) -> BinaryIO:
        if self.data is not None:
            return io.BytesIO(self.data)
        if self.path is None:
            raise ValueError(f"{self.name} has neither a path nor in-memory data")
        return open(self.path, "rb")

    def read_bytes(self) -> bytes:
        with self.open() as fh:
            return fh.read()


@dataclass(frozen=True)
class UploadRequest:
    display_name: str
    file: FileCandidate


@dataclass(frozen=True)
class StoredFile:
    filename: str
    original_name: str
    url: str

    def to_dict(self, message: str = MSG_UPLOADED) -> dict:
        return {
            "message": message,
            "filename": self.filename,
            "originalName": self.original_name,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredFile":
        return cls(
            filename=data["filename"],
            original_name=data["originalName"],
            url=data["url"],
        )


def error_body(message: str) -> dict:
    return {"error": message}


def public_url(filename: str) -> str:
    return f"{PUBLIC_UPLOAD_PREFIX}/{filename}"


def file_problem(mime_type: str, size_bytes: int) -> Optional[str]:
    """Return the message for the first rule a file breaks, or None."""
    if size_bytes > MAX_FILE_SIZE:
        return MSG_FILE_TOO_LARGE
    if mime_type not in ACCEPTED_FILE_TYPES:
        return MSG_FILE_TYPE
    return None
