import logging
from datetime import datetime, timezone

from flask import current_app, jsonify

from . import diagnostics_bp
from ..assets.errors import AssetError
from ..assets.storage import CLOUDINARY, get_storage

logger = logging.getLogger(__name__)


@diagnostics_bp.route("/simple-test", methods=["GET"])
def simple_test():
    credentials = current_app.config["CLOUDINARY_CREDENTIALS"]
    presence = credentials.presence()
    return jsonify({
        "success": True,
        "message": "API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "env": {
            "storageBackend": current_app.config["STORAGE_BACKEND"],
            "hasCloudinaryCloudName": presence["hasCloudName"],
            "hasCloudinaryApiKey": presence["hasApiKey"],
            "hasCloudinaryApiSecret": presence["hasApiSecret"],
        },
    })


@diagnostics_bp.route("/test-upload", methods=["GET"])
def test_upload():
    credentials = current_app.config["CLOUDINARY_CREDENTIALS"]
    presence = credentials.presence()
    body = {"cloudinaryConfigured": credentials.configured}
    body.update(presence)
    body.update({
        "cloudName": "Set" if presence["hasCloudName"] else "Missing",
        "apiKey": "Set" if presence["hasApiKey"] else "Missing",
        "apiSecret": "Set" if presence["hasApiSecret"] else "Missing",
    })
    return jsonify(body)


@diagnostics_bp.route("/test-cloudinary", methods=["GET"])
def test_cloudinary():
    """Check the Cloudinary configuration and make one ping round trip."""
    backend = get_storage(CLOUDINARY)
    try:
        probe = backend.probe()
    except AssetError as e:
        logger.error("Cloudinary connectivity probe failed: %s", e.message)
        body = {"success": False, "error": "Cloudinary test failed"}
        body.update({k: v for k, v in e.to_dict().items() if k != "error"})
        body["details"] = body.get("details") or e.message
        return jsonify(body), e.status_code

    body = {"success": True, "message": "Cloudinary is working!"}
    body.update(probe)
    return jsonify(body)


@diagnostics_bp.route("/test-local", methods=["GET"])
def test_local():
    return jsonify(get_storage("local").probe())
