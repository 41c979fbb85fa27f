"""
Product Media Editor — in-memory state for one product edit session.

Holds the ordered image list, the video list, the optional hover image,
and the free-form specification rows. The hover index always points at an
existing image or is None; every mutation that could break that goes
through a method here.

## Usage

    state = ProductMediaState.from_product(product)
    state.add_image(url)
    state.toggle_hover_image(1)
    state.remove_image(0)          # hover index shifts down to 0
    payload = state.to_payload()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.product import Product

if TYPE_CHECKING:
    from ..api.client import StoreApiClient

logger = logging.getLogger(__name__)


class ProductMediaState:
    """Images, videos and the hover image of the product being edited."""

    def __init__(
        self,
        images: Iterable[str] = (),
        videos: Iterable[str] = (),
        hover_image_index: Optional[int] = None,
    ):
        self._images: List[str] = list(images)
        self._videos: List[str] = list(videos)
        self._hover: Optional[int] = None
        if hover_image_index is not None:
            self._check_image_index(hover_image_index)
            self._hover = hover_image_index

    @classmethod
    def from_product(cls, product: Product) -> "ProductMediaState":
        return cls(
            images=product.images,
            videos=product.videos,
            hover_image_index=product.hover_image_index,
        )

    # ── Read access ──────────────────────────────────────────────

    @property
    def images(self) -> Tuple[str, ...]:
        return tuple(self._images)

    @property
    def videos(self) -> Tuple[str, ...]:
        return tuple(self._videos)

    @property
    def hover_image_index(self) -> Optional[int]:
        return self._hover

    @property
    def primary_image(self) -> Optional[str]:
        return self._images[0] if self._images else None

    @property
    def hover_image_url(self) -> Optional[str]:
        if self._hover is None:
            return None
        return self._images[self._hover]

    # ── Images ───────────────────────────────────────────────────

    def add_image(self, url: str) -> None:
        self._images.append(url)

    def remove_image(self, index: int) -> str:
        """Remove the image at index, keeping the hover index valid."""
        self._check_image_index(index)
        removed = self._images.pop(index)

        if self._hover == index:
            self._hover = None
        elif self._hover is not None and self._hover > index:
            self._hover -= 1
        return removed

    def move_image(self, src: int, dst: int) -> None:
        """Move an image to a new position; the hover mark follows its image."""
        self._check_image_index(src)
        self._check_image_index(dst)
        if src == dst:
            return

        hover = self._hover
        self._images.insert(dst, self._images.pop(src))

        if hover is None:
            return
        if hover == src:
            self._hover = dst
        elif src < hover <= dst:
            self._hover = hover - 1
        elif dst <= hover < src:
            self._hover = hover + 1

    def toggle_hover_image(self, index: int) -> None:
        """Mark an image as the hover image, or clear it if already marked."""
        self._check_image_index(index)
        self._hover = None if self._hover == index else index

    # ── Videos ───────────────────────────────────────────────────

    def add_video(self, url: str) -> None:
        self._videos.append(url)

    def remove_video(self, index: int) -> str:
        if not 0 <= index < len(self._videos):
            raise IndexError(f"Video index {index} out of range (0..{len(self._videos) - 1})")
        return self._videos.pop(index)

    # ── Serialization ────────────────────────────────────────────

    def to_payload(self) -> Dict[str, Any]:
        """API field names for a product create/update body."""
        return {
            "images": list(self._images),
            "videos": list(self._videos),
            "hoverImageIndex": self._hover,
        }

    def _check_image_index(self, index: int) -> None:
        if not 0 <= index < len(self._images):
            raise IndexError(f"Image index {index} out of range (0..{len(self._images) - 1})")

    def __repr__(self) -> str:
        return (
            f"ProductMediaState(images={len(self._images)}, "
            f"videos={len(self._videos)}, hover={self._hover})"
        )


@dataclass
class SpecificationRow:
    key: str = ""
    value: str = ""


class SpecificationList:
    """
    Editable key/value rows for free-form product attributes.

    Kept as a list so blank or duplicate keys can exist while typing.
    collapse() turns it into the mapping the API stores.
    """

    def __init__(self, rows: Iterable[Tuple[str, str]] = ()):
        self._rows: List[SpecificationRow] = [SpecificationRow(k, v) for k, v in rows]

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "SpecificationList":
        if not mapping:
            return cls()
        return cls((str(k), "" if v is None else str(v)) for k, v in mapping.items())

    @property
    def rows(self) -> List[Tuple[str, str]]:
        return [(r.key, r.value) for r in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def add(self, key: str = "", value: str = "") -> int:
        """Append a row and return its index."""
        self._rows.append(SpecificationRow(key, value))
        return len(self._rows) - 1

    def update(self, index: int, key: Optional[str] = None, value: Optional[str] = None) -> None:
        self._check_row(index)
        row = self._rows[index]
        if key is not None:
            row.key = key
        if value is not None:
            row.value = value

    def remove(self, index: int) -> Tuple[str, str]:
        self._check_row(index)
        row = self._rows.pop(index)
        return row.key, row.value

    def move(self, src: int, dst: int) -> None:
        self._check_row(src)
        self._check_row(dst)
        self._rows.insert(dst, self._rows.pop(src))

    def collapse(self) -> Dict[str, str]:
        """Trimmed, non-empty pairs as a mapping. Later duplicates win."""
        result: Dict[str, str] = {}
        for row in self._rows:
            key = row.key.strip()
            value = row.value.strip()
            if not key or not value:
                continue
            if key in result:
                logger.debug(f"Duplicate specification key {key!r}, keeping the later value")
            result[key] = value
        return result

    def _check_row(self, index: int) -> None:
        if not 0 <= index < len(self._rows):
            raise IndexError(f"Row index {index} out of range (0..{len(self._rows) - 1})")


class ProductEditSession:
    """
    One open product form: media state plus specification rows.

    Nothing is persisted until save(). Closing the form just drops the
    session; the last save wins on the server.
    """

    def __init__(self, product: Optional[Product] = None):
        self.product = product or Product()
        self.media = ProductMediaState.from_product(self.product)
        self.specifications = SpecificationList.from_mapping(self.product.specifications)

    @property
    def is_new(self) -> bool:
        return self.product.id is None

    def to_payload(self, **fields: Any) -> Dict[str, Any]:
        """Media and specifications, plus any other product fields given."""
        payload: Dict[str, Any] = dict(fields)
        payload.update(self.media.to_payload())
        payload["specifications"] = self.specifications.collapse()
        return payload

    def save(self, api: "StoreApiClient", **fields: Any) -> Product:
        payload = self.to_payload(**fields)
        if self.is_new:
            saved = api.create_product(payload)
        else:
            saved = api.update_product(self.product.id, payload)
        logger.info(
            f"Saved product {saved.id}: {len(self.media.images)} images, "
            f"{len(self.media.videos)} videos"
        )
        self.product = saved
        return saved
