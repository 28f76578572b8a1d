"""
Multipart POST of one UploadRequest, with upload progress.

The body is encoded up front (files are capped at 5MB) and handed to requests
as a sized, readable object; each read by the HTTP layer is one progress event.
"""
import math
from typing import Callable, Optional

import requests
from urllib3 import encode_multipart_formdata

from contracts.upload import (
    FILE_FIELD,
    MSG_UPLOAD_FAILED,
    NAME_FIELD,
    UPLOAD_PATH,
    StoredFile,
    UploadRequest,
)

DEFAULT_ENDPOINT = "http://127.0.0.1:8080" + UPLOAD_PATH
DEFAULT_TIMEOUT = 60

ProgressCallback = Callable[[int, int], None]


class UploadError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def percent(sent: int, total: int) -> int:
    """round(sent * 100 / total), halves rounded up."""
    if total <= 0:
        return 100
    return int(math.floor(sent * 100 / total + 0.5))


class ProgressReader:
    """Read-only view over an encoded body that reports bytes handed out."""

    def __init__(self, body: bytes, callback: Optional[ProgressCallback] = None):
        self._body = body
        self._pos = 0
        self._callback = callback

    def __len__(self):
        return len(self._body)

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            end = len(self._body)
        else:
            end = min(len(self._body), self._pos + size)
        chunk = self._body[self._pos:end]
        self._pos = end
        if chunk and self._callback is not None:
            self._callback(self._pos, len(self._body))
        return chunk


def encode_request(upload: UploadRequest):
    fields = {
        FILE_FIELD: (upload.file.name, upload.file.read_bytes(), upload.file.mime_type or "application/octet-stream"),
        NAME_FIELD: upload.display_name,
    }
    return encode_multipart_formdata(fields)


def _error_message(response) -> str:
    try:
        data = response.json()
    except ValueError:
        return MSG_UPLOAD_FAILED
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return MSG_UPLOAD_FAILED


def post_upload(
    endpoint: str,
    upload: UploadRequest,
    on_progress: Optional[ProgressCallback] = None,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> StoredFile:
    """
    Send one upload and return where the server stored it.
    Raises UploadError with the message to show the user.
    """
    body, content_type = encode_request(upload)
    http = session or requests

    try:
        response = http.post(
            endpoint,
            data=ProgressReader(body, on_progress),
            headers={"Content-Type": content_type},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise UploadError(MSG_UPLOAD_FAILED) from e

    if not response.ok:
        raise UploadError(_error_message(response), response.status_code)

    try:
        return StoredFile.from_dict(response.json())
    except (ValueError, KeyError, TypeError) as e:
        raise UploadError(MSG_UPLOAD_FAILED, response.status_code) from e
