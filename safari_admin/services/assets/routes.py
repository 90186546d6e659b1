import logging
import os

from flask import current_app, jsonify, request

from . import assets_bp
from .errors import AssetError, BadRequest, DeleteFailed, FileTooLarge, UploadFailed
from .slots import get_mapping
from .storage import CLOUDINARY, LOCAL, get_storage

logger = logging.getLogger(__name__)


def _file_size(file):
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _parse_index(raw):
    if raw is None or raw == "":
        return 1
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise BadRequest(f"imageIndex must be an integer, got {raw!r}") from None


@assets_bp.route("/upload", methods=["GET"])
def upload_status():
    backend = get_storage()
    return jsonify({
        "success": True,
        "message": "Upload API is working!",
        "storage": backend.name,
        "maxFileSize": current_app.config["MAX_UPLOAD_BYTES"],
    })


@assets_bp.route("/upload", methods=["POST"])
def upload():
    file = request.files.get("file")
    if file is None or not file.filename:
        raise BadRequest("No file uploaded")

    if not (file.mimetype or "").startswith("image/"):
        raise BadRequest(f"{file.filename} is not an image file")

    size = _file_size(file)
    limit = current_app.config["MAX_UPLOAD_BYTES"]
    if size == 0:
        raise BadRequest(f"{file.filename} is empty")
    if size > limit:
        raise FileTooLarge(file.filename, limit)

    experience_type = request.form.get("experienceType")
    mapping = get_mapping(experience_type)
    image_index = _parse_index(request.form.get("imageIndex"))
    if not mapping.is_valid_slot(image_index):
        logger.warning(
            "Slot %s is outside the registered slots for %s; uploading anyway",
            image_index, experience_type,
        )

    backend = get_storage(request.form.get("storage") or None)
    filename = mapping.filename_for(image_index)

    try:
        stored = backend.write(file, filename, file.mimetype)
    except AssetError:
        raise
    except Exception as e:
        logger.exception("Upload of %s to %s failed", filename, backend.name)
        raise UploadFailed(details=str(e)) from e

    result = {
        "message": f"File uploaded successfully ({backend.name} storage)",
        "filename": filename,
        "url": stored.url,
        "fullPath": stored.full_path,
        "originalName": file.filename,
        "size": size,
        "experienceType": experience_type,
        "imageIndex": image_index,
        "storage": backend.name,
    }
    if backend.name == CLOUDINARY:
        result["cloudinaryId"] = stored.identifier
    return jsonify(result)


@assets_bp.route("/delete", methods=["DELETE"])
def delete():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise BadRequest("Filename is required")
    cloudinary_id = data.get("cloudinaryId")
    filename = data.get("filename")

    if cloudinary_id:
        backend, identifier = get_storage(CLOUDINARY), cloudinary_id
    elif filename:
        backend, identifier = get_storage(LOCAL), filename
    else:
        raise BadRequest("Filename is required")

    if not isinstance(identifier, str):
        raise BadRequest("Filename must be a string")

    try:
        deleted = backend.delete(identifier)
    except AssetError:
        raise
    except Exception as e:
        logger.exception("Delete of %s from %s failed", identifier, backend.name)
        raise DeleteFailed(details=str(e)) from e

    body = {"message": "File deleted successfully"}
    if backend.name == CLOUDINARY:
        body["cloudinaryId"] = deleted
    else:
        body["deletedFile"] = deleted
    return jsonify(body)
