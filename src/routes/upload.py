from flask import Blueprint, request, jsonify, current_app
import os
import traceback

from contracts.upload import (
    FILE_FIELD,
    MSG_NO_FILE,
    MSG_UPLOAD_ERROR,
    UPLOAD_ROUTE,
    UPLOAD_SUBDIR,
    error_body,
    file_problem,
)
from observability.debug_log import log_debug
from observability.metrics import inc
from services.storage.local_store import client_basename, store_upload

upload_bp = Blueprint("upload", __name__)


def upload_dir():
    return os.path.join(current_app.config["PUBLIC_DIR"], UPLOAD_SUBDIR)


def _stream_size(stream):
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


@upload_bp.route(UPLOAD_ROUTE, methods=["POST"])
def upload_file():
    """
    Store the multipart "file" part under uploads/<millis>-<name>.
    The "name" part is sent by the form but not read here.
    """
    inc("upload_requests")

    f = request.files.get(FILE_FIELD)
    original_name = client_basename(f.filename) if f is not None else ""
    if f is None or not original_name:
        inc("upload_rejections")
        log_debug("Rejected: no file part")
        return jsonify(error_body(MSG_NO_FILE)), 400

    try:
        size = _stream_size(f.stream)

        # off by default: direct API calls may bypass the form's limits
        if current_app.config.get("UPLOAD_ENFORCE_RULES"):
            problem = file_problem(f.mimetype, size)
            if problem:
                inc("upload_rejections")
                log_debug(f"Rejected {original_name} ({f.mimetype}, {size} bytes): {problem}")
                return jsonify(error_body(problem)), 400

        stored = store_upload(f.stream, original_name, upload_dir())
        inc("upload_bytes_total", size)
        log_debug(f"Stored {original_name} as {stored.filename} ({size} bytes)")
        return jsonify(stored.to_dict())

    except Exception as e:
        inc("upload_failures")
        current_app.logger.error("Error uploading file: %s", e)
        log_debug(f"Upload failed for {original_name}: {e}\n{traceback.format_exc()}")
        return jsonify(error_body(MSG_UPLOAD_ERROR.format(detail=e))), 500
