import io
import threading

import pytest
from PIL import Image
from werkzeug.serving import make_server

from app import create_app
from observability import metrics
from services.storage import local_store


def _png_bytes(size=(40, 20), color=(200, 30, 30, 128)):
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return _png_bytes


@pytest.fixture
def public_dir(tmp_path):
    return tmp_path / "public"


@pytest.fixture
def uploads_dir(public_dir):
    return public_dir / "uploads"


@pytest.fixture
def app(tmp_path, public_dir):
    metrics.reset()
    app = create_app({
        "TESTING": True,
        "PUBLIC_DIR": str(public_dir),
        "STORAGE_DIR": str(tmp_path / "storage"),
        "UPLOAD_ENFORCE_RULES": False,
    })
    yield app
    metrics.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def live_server(app):
    """The app on a real socket; yields its base URL."""
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        thread.join(timeout=5)


@pytest.fixture
def fixed_clock(monkeypatch):
    """Make the server see the given millisecond timestamps, in order."""

    def _set(*values):
        it = iter(values)
        monkeypatch.setattr(local_store, "current_millis", lambda: next(it))

    return _set
