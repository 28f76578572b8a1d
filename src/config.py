import os

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE


def load_settings():
    """
    Read settings from the environment.
    Keys are Flask config names so the result can go straight into app.config.
    """
    return {
        # static root; uploads land in PUBLIC_DIR/uploads and are served from there
        "PUBLIC_DIR": os.environ.get("PUBLIC_DIR", os.path.join(ROOT_DIR, "public")),
        "STORAGE_DIR": os.environ.get("STORAGE_DIR", "storage"),
        "UPLOAD_ENFORCE_RULES": _env_bool("UPLOAD_ENFORCE_RULES"),
        "PORT": int(os.environ.get("PORT", 8080)),
    }
