"""
Image Compressor — shrink images to WebP before they leave the machine.

Pipeline:
1. Decode with Pillow
2. Cap the width at 1920px (height follows the aspect ratio)
3. Normalize the color mode for WebP (drop unused alpha)
4. Encode at descending quality levels until one fits the size target

Videos never pass through here; they are validated and uploaded as-is.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from ..models.media import MediaFile
from ..validation import CompressionError

logger = logging.getLogger(__name__)

# ── Defaults ─────────────────────────────────────────────────

MAX_WIDTH = 1920                 # px, height scales proportionally
DEFAULT_MAX_SIZE_MB = 2.0        # target for normal uploads
RELAXED_MAX_SIZE_MB = 20.0       # target for banner-style uploads
QUALITY_STEPS = (90, 85, 80, 75, 70, 65, 60)
WEBP_MIME = "image/webp"


def compress_image(
    file: MediaFile,
    max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    *,
    max_width: int = MAX_WIDTH,
) -> MediaFile:
    """
    Compress an image to WebP under a byte budget.

    Args:
        file: The image to compress.
        max_size_mb: Target ceiling for the encoded size, in megabytes.
        max_width: Width cap in pixels.

    Returns:
        A new MediaFile with WebP bytes, or the input itself when it is
        already WebP and under the target.

    Raises:
        CompressionError: If the image cannot be decoded, exceeds Pillow's
            pixel limit, or no quality level in QUALITY_STEPS fits under
            the target.
    """
    max_bytes = int(max_size_mb * 1024 * 1024)

    if file.mime_type == WEBP_MIME and file.size <= max_bytes:
        logger.debug(f"Skipping compression: {file.filename} already WebP under {max_size_mb}MB")
        return file

    try:
        img = Image.open(io.BytesIO(file.data))
        img.load()
    except Image.DecompressionBombError:
        raise CompressionError(
            f"Image {file.filename} has too many pixels to process. "
            "Please resize it before uploading.",
            details={"filename": file.filename, "max_pixels": Image.MAX_IMAGE_PIXELS},
        )
    except (UnidentifiedImageError, OSError) as e:
        raise CompressionError(f"Unable to read image {file.filename}: {e}")

    original_dims = img.size
    img = _prepare(img, max_width)

    for quality in QUALITY_STEPS:
        encoded = _encode_webp(img, quality)
        if len(encoded) <= max_bytes:
            pct = len(encoded) / file.size * 100 if file.size else 0
            logger.info(
                f"Compressed {file.filename}: "
                f"{original_dims[0]}x{original_dims[1]} ({file.mime_type}) → "
                f"{img.size[0]}x{img.size[1]} (webp q={quality}): "
                f"{file.size:,} → {len(encoded):,} bytes ({pct:.0f}%)"
            )
            return MediaFile(
                filename=_webp_name(file.filename),
                mime_type=WEBP_MIME,
                data=encoded,
            )
        logger.debug(f"q={quality}: {len(encoded):,} bytes > {max_bytes:,}")

    raise CompressionError(
        f"Unable to compress image under {max_size_mb:g}MB. "
        "Please compress the image manually before uploading.",
        details={"filename": file.filename, "max_bytes": max_bytes},
    )


def target_dimensions(width: int, height: int, max_width: int = MAX_WIDTH) -> Tuple[int, int]:
    """Scale (width, height) so width <= max_width. Never upscales."""
    if width <= max_width:
        return width, height
    ratio = max_width / width
    return max_width, max(1, round(height * ratio))


# ── Internal helpers ─────────────────────────────────────────


def _prepare(img: Image.Image, max_width: int) -> Image.Image:
    """Apply EXIF orientation, resize, and pick a WebP-friendly mode."""
    img = ImageOps.exif_transpose(img)

    new_size = target_dimensions(img.width, img.height, max_width)
    if new_size != img.size:
        logger.debug(f"Resized: {img.width}x{img.height} → {new_size[0]}x{new_size[1]}")
        img = img.resize(new_size, Image.Resampling.LANCZOS)

    if img.mode in ("P", "PA", "LA"):
        img = img.convert("RGBA")
    if img.mode == "RGBA":
        if not _has_meaningful_alpha(img):
            img = img.convert("RGB")
    elif img.mode != "RGB":
        img = img.convert("RGB")
    return img


def _encode_webp(img: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="WEBP", quality=quality, method=4)
    return buf.getvalue()


def _has_meaningful_alpha(img: Image.Image) -> bool:
    """Check if an RGBA image actually uses transparency."""
    alpha = img.split()[-1]
    return alpha.getextrema()[0] < 255


def _webp_name(filename: str) -> str:
    stem = PurePath(filename).stem or "image"
    return f"{stem}.webp"
