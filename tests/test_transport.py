import socket

import pytest

from client.transport import (
    DEFAULT_ENDPOINT,
    ProgressReader,
    UploadError,
    encode_request,
    percent,
    post_upload,
)
from contracts.upload import UPLOAD_PATH, FileCandidate, UploadRequest
from services.storage import local_store


def _request(name="doc.pdf", data=b"%PDF-1.4 hello", display="Ann"):
    return UploadRequest(display_name=display, file=FileCandidate.from_bytes(name, data))


@pytest.mark.parametrize("sent, total, expected", [
    (0, 10, 0), (1, 200, 1), (1, 3, 33), (1, 2, 50), (1, 8, 13), (10, 10, 100), (0, 0, 100),
])
def test_percent(sent, total, expected):
    assert percent(sent, total) == expected


def test_progress_reader_reports_each_read():
    events = []
    reader = ProgressReader(b"abcdefghij", lambda sent, total: events.append((sent, total)))

    assert len(reader) == 10
    assert reader.read(4) == b"abcd"
    assert reader.read(4) == b"efgh"
    assert reader.read(4) == b"ij"
    assert reader.read(4) == b""
    assert events == [(4, 10), (8, 10), (10, 10)]


def test_encoded_body_has_file_and_name_parts():
    body, content_type = encode_request(_request())

    assert content_type.startswith("multipart/form-data; boundary=")
    assert b'name="file"; filename="doc.pdf"' in body
    assert b"Content-Type: application/pdf" in body
    assert b'name="name"' in body
    assert b"%PDF-1.4 hello" in body


def test_post_upload_round_trip(live_server, uploads_dir):
    data = b"%PDF-1.4 " + b"x" * 200_000
    events = []

    stored = post_upload(live_server + UPLOAD_PATH, _request(data=data),
                         on_progress=lambda sent, total: events.append(percent(sent, total)))

    assert stored.original_name == "doc.pdf"
    assert stored.filename.endswith("-doc.pdf")
    assert stored.url == "/uploads/" + stored.filename
    assert (uploads_dir / stored.filename).read_bytes() == data
    assert len(events) > 1
    assert events == sorted(events)
    assert events[-1] == 100


def test_server_error_message_is_surfaced(live_server, monkeypatch):
    def broken(path):
        raise OSError("read-only file system")

    monkeypatch.setattr(local_store, "ensure_dir", broken)

    with pytest.raises(UploadError) as exc:
        post_upload(live_server + "/api/upload", _request())

    assert exc.value.status_code == 500
    assert exc.value.message == "Error uploading file: read-only file system"


def test_non_json_error_falls_back_to_generic_message(live_server):
    with pytest.raises(UploadError) as exc:
        post_upload(live_server + "/api/health", _request())

    assert exc.value.status_code == 405
    assert exc.value.message == "Upload failed"


def test_network_failure_is_generic():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]

    with pytest.raises(UploadError) as exc:
        post_upload(f"http://127.0.0.1:{port}/api/upload", _request(), timeout=5)

    assert exc.value.status_code is None
    assert exc.value.message == "Upload failed"


def test_default_endpoint_targets_the_upload_route():
    assert DEFAULT_ENDPOINT.endswith(UPLOAD_PATH)
    assert UPLOAD_PATH == "/api/upload"
