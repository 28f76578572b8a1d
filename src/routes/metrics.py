from flask import Blueprint, jsonify
from observability.metrics import snapshot
from routes.upload import upload_dir
import os

metrics_bp = Blueprint("metrics", __name__)

@metrics_bp.route("/metrics", methods=["GET"])
def metrics():
    directory = upload_dir()
    stored = 0
    if os.path.isdir(directory):
        stored = len([n for n in os.listdir(directory) if not n.startswith(".")])
    return jsonify({"counters": snapshot(), "stored_files": stored})
