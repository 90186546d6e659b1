"""Errors raised by the upload/delete handlers and storage backends.

Each error knows its HTTP status and how to render itself as a JSON body;
the assets blueprint turns any ``AssetError`` into a response.
"""


class AssetError(Exception):
    status_code = 500
    error = "Request failed"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class MethodNotAllowed(AssetError):
    status_code = 405
    error = "Method not allowed"


class BadRequest(AssetError):
    status_code = 400
    error = "Bad request"


class InvalidCategory(BadRequest):
    def __init__(self, key, valid_keys):
        super().__init__(
            "Invalid experience type. Must be one of: " + ", ".join(valid_keys)
        )
        self.key = key


class FileTooLarge(BadRequest):
    status_code = 413

    def __init__(self, filename, limit):
        super().__init__(
            f"{filename} is too large. Maximum size is {limit // (1024 * 1024)}MB."
        )
        self.limit = limit


class NotFound(AssetError):
    status_code = 404
    error = "File not found"

    def __init__(self, identifier, searched_paths=None, field="filename"):
        super().__init__()
        self.identifier = identifier
        self.searched_paths = list(searched_paths or [])
        self.field = field

    def to_dict(self):
        body = {"error": self.message, self.field: self.identifier}
        if self.searched_paths:
            body["searchedPaths"] = self.searched_paths
        return body


class UploadFailed(AssetError):
    error = "Upload failed"


class BackendMisconfigured(UploadFailed):
    error = "Cloudinary is not configured"

    def __init__(self, presence):
        missing = [name for name, present in presence.items() if not present]
        super().__init__(details="Missing credentials: " + ", ".join(missing))
        self.presence = dict(presence)

    def to_dict(self):
        body = super().to_dict()
        body.update(self.presence)
        return body


class AuthError(UploadFailed):
    """Cloudinary rejected the configured credentials."""

    SIGNATURE = "signature"
    AUTHORIZATION = "authorization"

    def __init__(self, reason, details=None):
        if reason == self.SIGNATURE:
            message = "Cloudinary rejected the request signature; check CLOUDINARY_API_SECRET"
        else:
            message = "Cloudinary authorization failed; check CLOUDINARY_API_KEY"
        super().__init__(message, details)
        self.reason = reason

    def to_dict(self):
        body = super().to_dict()
        body["reason"] = self.reason
        return body


class DeleteFailed(AssetError):
    error = "Delete failed"
