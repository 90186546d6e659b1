import logging

from flask import Flask, jsonify, request

from .config import Config
from .commands import register_commands
from .services.assets import assets_bp
from .services.assets.errors import AssetError, FileTooLarge, MethodNotAllowed
from .services.assets.storage import create_storage
from .services.diagnostics import diagnostics_bp
from .services.frontend import frontend_bp

logger = logging.getLogger(__name__)


def _wants_json():
    return request.path.startswith("/api/")


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Built once; backends never re-read the environment.
    app.extensions["asset_storage"] = create_storage(app.config)

    app.register_blueprint(frontend_bp)
    app.register_blueprint(assets_bp, url_prefix="/api")
    app.register_blueprint(diagnostics_bp, url_prefix="/api")

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy", "storage": app.config["STORAGE_BACKEND"]})

    @app.errorhandler(404)
    def not_found(err):
        if _wants_json():
            return jsonify({"error": "Not found"}), 404
        return err

    @app.errorhandler(405)
    def method_not_allowed(err):
        if _wants_json():
            return jsonify(MethodNotAllowed().to_dict()), 405
        return err

    @app.errorhandler(413)
    def request_too_large(err):
        if _wants_json():
            too_large = FileTooLarge("Upload", app.config["MAX_UPLOAD_BYTES"])
            return jsonify(too_large.to_dict()), too_large.status_code
        return err

    @app.errorhandler(AssetError)
    def asset_error(err):
        return jsonify(err.to_dict()), err.status_code

    register_commands(app)

    logger.info(
        "Safari admin started with %s storage, public dir %s",
        app.config["STORAGE_BACKEND"], app.config["PUBLIC_DIR"],
    )
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, host="0.0.0.0", port=5000)
