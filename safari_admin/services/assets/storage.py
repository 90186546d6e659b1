import logging
import os
from dataclasses import dataclass

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
from flask import current_app

from .errors import (
    AuthError,
    BackendMisconfigured,
    BadRequest,
    DeleteFailed,
    NotFound,
    UploadFailed,
)

logger = logging.getLogger(__name__)

LOCAL = "local"
CLOUDINARY = "cloudinary"


@dataclass
class StoredAsset:
    identifier: str
    url: str
    full_path: str
    backend: str


class LocalStorage:
    """Writes slot images under ``<public_dir>/assets``.

    Deletion also looks in the legacy ``uploads`` folder and the public root,
    since older uploads were saved there.
    """

    name = LOCAL
    folder = "assets"
    legacy_folder = "uploads"

    def __init__(self, public_dir, base_url):
        self.public_dir = os.path.abspath(public_dir)
        self.base_url = base_url.rstrip("/")

    @property
    def assets_dir(self):
        return os.path.join(self.public_dir, self.folder)

    def write(self, file, filename, content_type=None):
        os.makedirs(self.assets_dir, exist_ok=True)
        filepath = os.path.join(self.assets_dir, filename)
        file.save(filepath)
        logger.info("Saved %s to %s", filename, filepath)
        url = f"/{self.folder}/{filename}"
        return StoredAsset(
            identifier=filename,
            url=url,
            full_path=f"{self.base_url}{url}",
            backend=self.name,
        )

    def candidate_paths(self, filename):
        relative = filename.lstrip("/")
        candidates = [
            os.path.join(self.assets_dir, relative),
            os.path.join(self.public_dir, self.legacy_folder, relative),
            os.path.join(self.public_dir, relative),
        ]
        root = os.path.realpath(self.public_dir) + os.sep
        if "\x00" in filename:
            raise BadRequest(f"Invalid filename: {filename!r}")
        for path in candidates:
            if not os.path.realpath(path).startswith(root):
                raise BadRequest(f"Invalid filename: {filename}")
        return candidates

    def delete(self, filename):
        if not filename:
            raise BadRequest("Filename is required")
        candidates = self.candidate_paths(filename)
        for path in candidates:
            if os.path.isfile(path):
                try:
                    os.remove(path)
                except OSError as e:
                    logger.error("Error deleting %s: %s", path, e)
                    raise DeleteFailed(details=str(e)) from e
                logger.info("Deleted %s", path)
                return path
        logger.info("File not found in any of these paths: %s", candidates)
        raise NotFound(filename, candidates)

    def probe(self):
        exists = os.path.isdir(self.assets_dir)
        target = self.assets_dir if exists else self.public_dir
        return {
            "storage": self.name,
            "assetsDir": self.assets_dir,
            "exists": exists,
            "writable": os.access(target, os.W_OK),
        }


class CloudinaryStorage:
    """Uploads slot images to Cloudinary under a fixed folder.

    Credentials are passed explicitly on every SDK call; the module-level
    ``cloudinary.config()`` is never touched.
    """

    name = CLOUDINARY

    def __init__(self, credentials, folder="safari-admin"):
        self.credentials = credentials
        self.folder = folder

    def _options(self):
        if not self.credentials.configured:
            logger.error("Cloudinary credentials missing: %s", self.credentials.presence())
            raise BackendMisconfigured(self.credentials.presence())
        return self.credentials.as_options()

    def write(self, file, filename, content_type=None):
        options = self._options()
        public_id = os.path.splitext(filename)[0]
        stream = getattr(file, "stream", file)
        try:
            result = cloudinary.uploader.upload(
                stream,
                public_id=public_id,
                folder=self.folder,
                resource_type="image",
                overwrite=True,
                **options,
            )
        except cloudinary.exceptions.Error as e:
            logger.error("Cloudinary upload error: %s", e)
            raise _classify_error(e) from e
        logger.info("Uploaded %s to Cloudinary as %s", filename, result["public_id"])
        return StoredAsset(
            identifier=result["public_id"],
            url=result["secure_url"],
            full_path=result["secure_url"],
            backend=self.name,
        )

    def delete(self, public_id):
        if not public_id:
            raise BadRequest("cloudinaryId is required")
        try:
            options = self._options()
        except BackendMisconfigured as e:
            raise DeleteFailed(details=e.details) from e
        try:
            result = cloudinary.uploader.destroy(public_id, **options)
        except cloudinary.exceptions.Error as e:
            logger.error("Cloudinary delete error: %s", e)
            raise DeleteFailed(details=str(e)) from e
        outcome = result.get("result")
        if outcome == "not found":
            raise NotFound(public_id, field="cloudinaryId")
        if outcome != "ok":
            raise DeleteFailed(details=f"Cloudinary returned {outcome!r}")
        logger.info("Deleted %s from Cloudinary", public_id)
        return public_id

    def probe(self):
        options = self._options()
        try:
            ping = cloudinary.api.ping(**options)
        except cloudinary.exceptions.Error as e:
            logger.error("Cloudinary ping failed: %s", e)
            raise _classify_error(e) from e
        return {
            "storage": self.name,
            "config": self.credentials.masked(),
            "ping": dict(ping),
        }


def _classify_error(error):
    message = str(error)
    lowered = message.lower()
    if "signature" in lowered:
        return AuthError(AuthError.SIGNATURE, message)
    if (
        isinstance(error, cloudinary.exceptions.AuthorizationRequired)
        or "api_key" in lowered
        or "api key" in lowered
        or "authoriz" in lowered
    ):
        return AuthError(AuthError.AUTHORIZATION, message)
    return UploadFailed(details=message)


def create_storage(config):
    return {
        LOCAL: LocalStorage(config["PUBLIC_DIR"], config["PUBLIC_BASE_URL"]),
        CLOUDINARY: CloudinaryStorage(
            config["CLOUDINARY_CREDENTIALS"], config["CLOUDINARY_FOLDER"]
        ),
    }


def get_storage(name=None):
    backends = current_app.extensions["asset_storage"]
    name = name or current_app.config["STORAGE_BACKEND"]
    try:
        return backends[name]
    except KeyError:
        raise BadRequest(
            f"Unknown storage backend: {name}. Must be one of: " + ", ".join(backends)
        ) from None
