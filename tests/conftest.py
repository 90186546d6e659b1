"""Shared fixtures: an app writing into a temporary public dir."""
import io

import pytest

from safari_admin import create_app
from safari_admin.config import CloudinaryCredentials

TEST_CREDENTIALS = CloudinaryCredentials(
    cloud_name="demo-cloud", api_key="123456789012", api_secret="s3cr3t-value"
)
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 128


@pytest.fixture
def public_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    return path


@pytest.fixture
def make_app(public_dir):
    def _make_app(**overrides):
        config = {
            "TESTING": True,
            "SECRET_KEY": "test",
            "ADMIN_PASSWORD": "letmein",
            "PUBLIC_DIR": str(public_dir),
            "PUBLIC_BASE_URL": "http://admin.test",
            "STORAGE_BACKEND": "local",
            "CLOUDINARY_CREDENTIALS": TEST_CREDENTIALS,
            "LOG_LEVEL": "DEBUG",
        }
        config.update(overrides)
        return create_app(config)
    return _make_app


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


def image_upload(experience_type="balloon", image_index="3", content=JPEG_BYTES,
                 filename="photo.jpg", content_type="image/jpeg", **extra):
    data = {
        "file": (io.BytesIO(content), filename, content_type),
        "experienceType": experience_type,
        "imageIndex": image_index,
    }
    data.update(extra)
    return data
