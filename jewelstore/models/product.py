"""
Product Model — Pydantic schema for the store API's product representation.

Only the fields the media editor reads or writes are modelled; anything
else the API sends is ignored. Missing optional fields take defaults.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Product(BaseModel):
    """A product as returned by /admin/products endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    title: str = ""
    slug: Optional[str] = None
    description: str = ""
    price: float = 0
    category: str = ""
    images: List[str] = Field(default_factory=list)
    videos: List[str] = Field(default_factory=list)
    hover_image_index: Optional[int] = Field(default=None, alias="hoverImageIndex")
    specifications: Dict[str, str] = Field(default_factory=dict)
    is_featured: bool = Field(default=False, alias="isFeatured")

    @field_validator("images", "videos", mode="before")
    @classmethod
    def _drop_blank_urls(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [v for v in value if isinstance(v, str) and v.strip()]
        return value

    @field_validator("specifications", mode="before")
    @classmethod
    def _stringify_specifications(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _check_hover_index(self) -> "Product":
        index = self.hover_image_index
        if index is not None and not 0 <= index < len(self.images):
            logger.warning(
                f"Product {self.id}: hover image index {index} out of range "
                f"for {len(self.images)} images, dropping it"
            )
            self.hover_image_index = None
        return self
