from flask import Flask, send_from_directory
import logging
import os
from config import load_settings
from contracts.upload import API_PREFIX
from observability.request_context import start_request, end_request
from routes.health import health_bp
from routes.metrics import metrics_bp
from routes.upload import upload_bp

def create_app(config=None):
    settings = load_settings()
    settings.update(config or {})

    # public root doubles as the static folder: "/" serves index.html, "/uploads/<name>" serves stored files
    app = Flask(__name__, static_folder=settings["PUBLIC_DIR"], static_url_path="")
    app.config.from_mapping(settings)
    app.logger.setLevel(logging.INFO)

    app.register_blueprint(health_bp, url_prefix=API_PREFIX)
    app.register_blueprint(upload_bp, url_prefix=API_PREFIX)
    app.register_blueprint(metrics_bp, url_prefix=API_PREFIX)

    @app.route("/")
    def index():
        return send_from_directory(app.static_folder, "index.html")

    @app.before_request
    def _before():
        start_request()

    @app.after_request
    def _after(response):
        return end_request(response)

    return app

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"])
