"""
Media Module — Validation, compression, upload, CDN URLs and the editor state.
"""

from .cdn import get_cdn_optimized_url, resolve_image_url
from .compress import compress_image
from .editor import ProductEditSession, ProductMediaState, SpecificationList
from .pipeline import MediaPipeline, prepare_file
from .upload import PresignedUploadClient, UploadClient

__all__ = [
    "get_cdn_optimized_url",
    "resolve_image_url",
    "compress_image",
    "ProductEditSession",
    "ProductMediaState",
    "SpecificationList",
    "MediaPipeline",
    "prepare_file",
    "UploadClient",
    "PresignedUploadClient",
]
