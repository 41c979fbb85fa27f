"""
CDN URLs — storage paths and edge-resized image variants.

Stored objects live in one bucket. Paths under it follow the folder layout:

    products/{product-slug}/{image}
    categories/{category-slug}/{image}
    banners/{banner}
    about/{image}

The CDN edge resizes and re-encodes images on request via query parameters.
Only URLs on the storage host are rewritten; everything else is opaque.
"""

from __future__ import annotations

from typing import Optional

from ..config.loader import DEFAULT_BUCKET_URL, DEFAULT_CDN_HOST
from ..models.media import media_kind

DEFAULT_QUALITY = 85
DEFAULT_FORMAT = "webp"
PLACEHOLDER_IMAGE = "/placeholder-jewelry.jpg"


def is_cdn_url(url: str, cdn_host: str = DEFAULT_CDN_HOST) -> bool:
    """True when the URL points at the storage provider."""
    return bool(url) and cdn_host in url


def is_video_url(url: str) -> bool:
    return media_kind(url) == "video"


def get_cdn_optimized_url(
    url: str,
    width: Optional[int] = None,
    quality: int = DEFAULT_QUALITY,
    fmt: str = DEFAULT_FORMAT,
    *,
    cdn_host: str = DEFAULT_CDN_HOST,
) -> str:
    """
    Ask the CDN for a resized/re-encoded variant of a stored image.

    Empty, foreign, and video URLs come back unchanged. Parameters are
    appended, never merged, so apply this once per URL.
    """
    if not url or not is_cdn_url(url, cdn_host) or is_video_url(url):
        return url

    params = []
    if width:
        params.append(f"width={width}")
    params.append(f"quality={quality}")
    params.append(f"format={fmt}")

    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{'&'.join(params)}"


# ── Storage paths ────────────────────────────────────────────


def get_storage_url(path: str, bucket_url: str = DEFAULT_BUCKET_URL) -> str:
    """Full URL for a path inside the bucket."""
    clean_path = path[1:] if path.startswith("/") else path
    return f"{bucket_url.rstrip('/')}/{clean_path}"


def get_product_image_url(product_slug: str, image_name: str, bucket_url: str = DEFAULT_BUCKET_URL) -> str:
    return get_storage_url(f"products/{product_slug}/{image_name}", bucket_url)


def get_category_image_url(
    category_slug: str,
    image_name: str = "cover.jpg",
    bucket_url: str = DEFAULT_BUCKET_URL,
) -> str:
    return get_storage_url(f"categories/{category_slug}/{image_name}", bucket_url)


def get_banner_image_url(banner_name: str, bucket_url: str = DEFAULT_BUCKET_URL) -> str:
    return get_storage_url(f"banners/{banner_name}", bucket_url)


def get_about_image_url(image_name: str, bucket_url: str = DEFAULT_BUCKET_URL) -> str:
    return get_storage_url(f"about/{image_name}", bucket_url)


def is_full_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def resolve_image_url(
    url: str,
    fallback: str = PLACEHOLDER_IMAGE,
    bucket_url: str = DEFAULT_BUCKET_URL,
) -> str:
    """Turn a stored value (full URL, bucket path, or empty) into a usable URL."""
    if not url:
        return fallback
    if is_full_url(url):
        return url
    return get_storage_url(url, bucket_url)
