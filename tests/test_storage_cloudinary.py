import io

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import pytest

from safari_admin.config import CloudinaryCredentials
from safari_admin.services.assets.errors import (
    AuthError,
    BackendMisconfigured,
    DeleteFailed,
    NotFound,
    UploadFailed,
)
from safari_admin.services.assets.storage import CloudinaryStorage
from tests.conftest import TEST_CREDENTIALS


class FakeCloudinary:
    """Records SDK calls instead of talking to Cloudinary."""

    def __init__(self):
        self.calls = []
        self.error = None
        self.destroy_result = {"result": "ok"}

    def upload(self, file, **options):
        self.calls.append(("upload", file, options))
        if self.error:
            raise self.error
        public_id = f"{options['folder']}/{options['public_id']}"
        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/demo-cloud/image/upload/{public_id}.jpg",
        }

    def destroy(self, public_id, **options):
        self.calls.append(("destroy", public_id, options))
        if self.error:
            raise self.error
        return self.destroy_result

    def ping(self, **options):
        self.calls.append(("ping", None, options))
        if self.error:
            raise self.error
        return {"status": "ok"}


@pytest.fixture
def fake_cloudinary(monkeypatch):
    fake = FakeCloudinary()
    monkeypatch.setattr(cloudinary.uploader, "upload", fake.upload)
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake.destroy)
    monkeypatch.setattr(cloudinary.api, "ping", fake.ping)
    return fake


@pytest.fixture
def storage():
    return CloudinaryStorage(TEST_CREDENTIALS, folder="safari-admin")


def test_write_uses_slot_name_as_public_id(storage, fake_cloudinary):
    stored = storage.write(io.BytesIO(b"jpeg"), "ac1.webp", "image/webp")

    _, _, options = fake_cloudinary.calls[0]
    assert options["public_id"] == "ac1"
    assert options["folder"] == "safari-admin"
    assert options["overwrite"] is True
    assert options["resource_type"] == "image"
    assert options["api_key"] == "123456789012"
    assert stored.identifier == "safari-admin/ac1"
    assert stored.url.startswith("https://")
    assert stored.full_path == stored.url
    assert stored.backend == "cloudinary"


def test_missing_credentials_never_call_the_sdk(fake_cloudinary):
    storage = CloudinaryStorage(CloudinaryCredentials(cloud_name="demo-cloud"))

    with pytest.raises(BackendMisconfigured) as exc_info:
        storage.write(io.BytesIO(b"jpeg"), "b3.jpg")

    assert fake_cloudinary.calls == []
    assert exc_info.value.presence == {
        "hasCloudName": True,
        "hasApiKey": False,
        "hasApiSecret": False,
    }
    body = exc_info.value.to_dict()
    assert body["hasApiKey"] is False
    assert "hasApiKey" in body["details"]


@pytest.mark.parametrize(
    "error, reason",
    [
        (cloudinary.exceptions.Error("Invalid Signature 1a2b3c. String to sign - 'public_id=b3'"), "signature"),
        (cloudinary.exceptions.AuthorizationRequired("Unknown API key 123"), "authorization"),
        (cloudinary.exceptions.Error("Invalid api_key 123"), "authorization"),
    ],
)
def test_credential_errors_become_auth_errors(storage, fake_cloudinary, error, reason):
    fake_cloudinary.error = error

    with pytest.raises(AuthError) as exc_info:
        storage.write(io.BytesIO(b"jpeg"), "b3.jpg")

    assert exc_info.value.reason == reason
    assert exc_info.value.status_code == 500


def test_other_sdk_errors_become_upload_failed(storage, fake_cloudinary):
    fake_cloudinary.error = cloudinary.exceptions.Error("Invalid image file")

    with pytest.raises(UploadFailed) as exc_info:
        storage.write(io.BytesIO(b"jpeg"), "b3.jpg")

    assert not isinstance(exc_info.value, AuthError)
    assert exc_info.value.details == "Invalid image file"


def test_delete_ok(storage, fake_cloudinary):
    assert storage.delete("safari-admin/b3") == "safari-admin/b3"
    assert fake_cloudinary.calls[0][:2] == ("destroy", "safari-admin/b3")


def test_delete_not_found(storage, fake_cloudinary):
    fake_cloudinary.destroy_result = {"result": "not found"}

    with pytest.raises(NotFound) as exc_info:
        storage.delete("safari-admin/b3")
    assert exc_info.value.to_dict() == {
        "error": "File not found",
        "cloudinaryId": "safari-admin/b3",
    }


def test_delete_backend_error(storage, fake_cloudinary):
    fake_cloudinary.error = cloudinary.exceptions.GeneralError("boom")

    with pytest.raises(DeleteFailed):
        storage.delete("safari-admin/b3")


def test_delete_without_credentials_fails(fake_cloudinary):
    storage = CloudinaryStorage(CloudinaryCredentials())

    with pytest.raises(DeleteFailed):
        storage.delete("safari-admin/b3")
    assert fake_cloudinary.calls == []


def test_probe_pings_with_masked_config(storage, fake_cloudinary):
    probe = storage.probe()

    assert probe["ping"] == {"status": "ok"}
    assert probe["config"] == {
        "cloudName": "demo-cloud",
        "apiKey": "***9012",
        "apiSecret": "***alue",
    }
    assert fake_cloudinary.calls[0][0] == "ping"
