"""
Validation — File checks and the media error taxonomy.

Every failure in the media pipeline surfaces to the caller as one of the
exceptions below, each carrying a message fit to show an admin.

## Usage

    from jewelstore.validation import validate_image_file

    result = validate_image_file(media_file)
    if not result.valid:
        print(result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .models.media import MediaFile

MB = 1024 * 1024

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
ALLOWED_VIDEO_TYPES = ("video/mp4", "video/webm", "video/quicktime", "video/x-msvideo")

# Images are compressed after validation, so the ceiling is generous
MAX_IMAGE_BYTES = 100 * MB
MAX_VIDEO_BYTES = 20 * MB


class MediaError(Exception):
    """Base class for all media pipeline errors."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class FileValidationError(MediaError):
    """A file failed the type or size checks."""


class CompressionError(MediaError):
    """An image could not be brought under the target size."""


class UploadError(MediaError):
    """The upload endpoint rejected the request or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict] = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)


class AuthenticationRequired(UploadError):
    """No session token is available."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ApiError(MediaError):
    """The store API returned a non-success response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a file check."""

    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)

    def raise_for_error(self) -> None:
        if not self.valid:
            raise FileValidationError(self.error or "Invalid file")


def validate_image_file(file: MediaFile) -> ValidationResult:
    """Check an image's MIME type and pre-compression size."""
    if file.mime_type not in ALLOWED_IMAGE_TYPES:
        return ValidationResult.fail("Only JPEG, PNG, WebP, and GIF images are allowed.")

    if file.size > MAX_IMAGE_BYTES:
        return ValidationResult.fail(
            f"Image must be less than {MAX_IMAGE_BYTES // MB}MB. "
            "Images are automatically compressed before upload."
        )

    return ValidationResult.ok()


def validate_video_file(file: MediaFile) -> ValidationResult:
    """Check a video's MIME type and size. Videos are never compressed here."""
    if file.mime_type not in ALLOWED_VIDEO_TYPES:
        return ValidationResult.fail("Only MP4, WebM, MOV, and AVI videos are allowed.")

    if file.size > MAX_VIDEO_BYTES:
        return ValidationResult.fail(
            f"Video must be less than {MAX_VIDEO_BYTES // MB}MB. "
            "Please compress the video before uploading."
        )

    return ValidationResult.ok()


def validate_media_file(file: MediaFile) -> ValidationResult:
    """Dispatch to the image or video check by MIME family."""
    if file.is_video:
        return validate_video_file(file)
    return validate_image_file(file)
