import datetime
import os

from flask import current_app, g, has_app_context

LOG_FILENAME = "error_debug.log"


def log_debug(msg, request_id=None):
    """
    Append a timestamped line to <STORAGE_DIR>/error_debug.log.
    Never raises: a broken debug log must not fail the request being logged.
    """
    try:
        storage_dir = "storage"
        rid = request_id
        if has_app_context():
            storage_dir = current_app.config.get("STORAGE_DIR", storage_dir)
            rid = rid or g.get("request_id")
        os.makedirs(storage_dir, exist_ok=True)
        stamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
        with open(os.path.join(storage_dir, LOG_FILENAME), "a", encoding="utf-8") as fh:
            fh.write(f"{stamp} [{rid or 'unknown'}] {msg}\n")
    except Exception:
        pass
