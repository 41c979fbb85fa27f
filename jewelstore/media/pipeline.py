"""
Media Pipeline — validate, compress, upload, then record in the editor.

    file ─▶ validate ─▶ compress (images only) ─▶ upload ─▶ state.add_*

The editor state only changes once an upload has returned a URL, so any
failure along the way leaves it exactly as it was. Removing media is
local first; the remote delete runs in the background and may fail
without consequence.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..models.media import MediaFile, UploadFolder
from ..validation import (
    FileValidationError,
    ValidationResult,
    validate_image_file,
    validate_media_file,
    validate_video_file,
)
from .compress import DEFAULT_MAX_SIZE_MB, compress_image
from .editor import ProductMediaState
from .upload import FolderLike, ProgressCallback, UploadClient

logger = logging.getLogger(__name__)


def _reject_invalid(file: MediaFile, result: ValidationResult) -> None:
    if not result.valid:
        logger.info(f"Rejected {file.filename}: {result.error}")
        raise FileValidationError(result.error, details={"filename": file.filename})


def prepare_file(
    file: MediaFile,
    max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    *,
    compress: bool = True,
) -> MediaFile:
    """
    Validate any media file and compress it if it is an image.

    Videos are returned as-is once they pass validation.

    Raises:
        FileValidationError: Wrong type or over the size limit.
        CompressionError: The image could not be brought under max_size_mb.
    """
    _reject_invalid(file, validate_media_file(file))
    if file.is_image and compress:
        return compress_image(file, max_size_mb)
    return file


class MediaPipeline:
    """Feeds uploaded media into one product's editor state."""

    def __init__(
        self,
        uploader: UploadClient,
        state: ProductMediaState,
        *,
        folder: FolderLike = UploadFolder.PRODUCTS,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    ):
        self.uploader = uploader
        self.state = state
        self.folder = UploadFolder(folder)
        self.max_size_mb = max_size_mb

    def prepare_image(self, file: MediaFile) -> MediaFile:
        """Validate and compress one image without uploading it."""
        _reject_invalid(file, validate_image_file(file))
        return compress_image(file, self.max_size_mb)

    def add_image_file(
        self,
        file: MediaFile,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        prepared = self.prepare_image(file)
        url = self.uploader.upload(prepared, self.folder, on_progress=on_progress)
        self.state.add_image(url)
        return url

    def add_image_files(
        self,
        files: Sequence[MediaFile],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[str]:
        """
        Add several images in order.

        Every file is validated and compressed before the first upload, so a
        bad file in the batch stops it before anything is sent.
        """
        prepared = [self.prepare_image(f) for f in files]
        urls = self.uploader.upload_many(prepared, self.folder, on_progress=on_progress)
        for url in urls:
            self.state.add_image(url)
        return urls

    def add_video_file(
        self,
        file: MediaFile,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        _reject_invalid(file, validate_video_file(file))
        url = self.uploader.upload(file, self.folder, on_progress=on_progress)
        self.state.add_video(url)
        return url

    def remove_image(self, index: int, *, delete_remote: bool = True) -> str:
        url = self.state.remove_image(index)
        if delete_remote:
            self.uploader.delete_in_background(url)
        return url

    def remove_video(self, index: int, *, delete_remote: bool = True) -> str:
        url = self.state.remove_video(index)
        if delete_remote:
            self.uploader.delete_in_background(url)
        return url
