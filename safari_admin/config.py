import os
from dataclasses import dataclass

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


@dataclass(frozen=True)
class CloudinaryCredentials:
    """Cloudinary account credentials, read once at startup.

    There are no fallback values: a missing credential stays empty and the
    remote backend refuses to make network calls until all three are set.
    """

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            cloud_name=environ.get("CLOUDINARY_CLOUD_NAME", ""),
            api_key=environ.get("CLOUDINARY_API_KEY", ""),
            api_secret=environ.get("CLOUDINARY_API_SECRET", ""),
        )

    @property
    def configured(self):
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def presence(self):
        return {
            "hasCloudName": bool(self.cloud_name),
            "hasApiKey": bool(self.api_key),
            "hasApiSecret": bool(self.api_secret),
        }

    def masked(self):
        def mask(value):
            return f"***{value[-4:]}" if value else "missing"

        return {
            "cloudName": self.cloud_name or "missing",
            "apiKey": mask(self.api_key),
            "apiSecret": mask(self.api_secret),
        }

    def as_options(self):
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or os.urandom(24).hex()
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")
    PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://localhost:5000")
    PUBLIC_DIR = os.environ.get("PUBLIC_DIR", os.path.join(BASE_DIR, "public"))
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "local")
    CLOUDINARY_CREDENTIALS = CloudinaryCredentials.from_env()
    CLOUDINARY_FOLDER = os.environ.get("CLOUDINARY_FOLDER", "safari-admin")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Per-file limit; the request limit leaves headroom for the multipart
    # envelope so oversized files reach the handler's own check.
    MAX_UPLOAD_BYTES = 5 * 1024 * 1024
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
