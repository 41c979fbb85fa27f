"""
Media Models — Files in flight and assets at rest.

A MediaFile is the in-memory file an admin picked (bytes plus declared MIME
type). A MediaAsset is what remains after upload: just a public URL, with
its kind inferred from the extension.
"""

from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".avi")

MediaKind = Literal["image", "video"]


class UploadFolder(str, Enum):
    """Destination folders on the object store. Each is its own key prefix."""

    BANNERS = "banners"
    PRODUCTS = "products"
    LOGOS = "logos"
    ABOUT = "about"
    CATEGORIES = "categories"

    @property
    def prefix(self) -> str:
        return f"{self.value}/"


def media_kind(url: str) -> MediaKind:
    """Classify a URL as video or image by its path extension."""
    path = urlsplit(url).path if "://" in url else url.split("?", 1)[0]
    if path.lower().endswith(VIDEO_EXTENSIONS):
        return "video"
    return "image"


class MediaAsset(BaseModel):
    """A stored media object. Only the URL is tracked."""

    model_config = ConfigDict(frozen=True)

    url: str

    @property
    def kind(self) -> MediaKind:
        return media_kind(self.url)

    @property
    def is_video(self) -> bool:
        return self.kind == "video"


class MediaFile(BaseModel):
    """A file selected for upload, held entirely in memory."""

    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")

    @classmethod
    def from_path(cls, path: Path, mime_type: Optional[str] = None) -> "MediaFile":
        """Read a file from disk, guessing the MIME type from its name."""
        path = Path(path)
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            mime_type = guessed or "application/octet-stream"
        return cls(filename=path.name, mime_type=mime_type, data=path.read_bytes())
