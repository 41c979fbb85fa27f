"""
Store API Client — the product endpoints the media editor needs.

Loads a product to hydrate an edit session and saves the result back.
Every request carries the tenant header; the bearer token is added when
the session has one.

## Endpoints

    GET    /admin/products/{id}/with-inventory
    POST   /admin/products
    PATCH  /admin/products/{id}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config.loader import SessionContext
from ..media.upload import error_message
from ..models.product import Product
from ..validation import ApiError

logger = logging.getLogger(__name__)


class StoreApiClient:
    """Thin JSON client over the store's REST API."""

    def __init__(
        self,
        session: SessionContext,
        api_url: str,
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.api_url = api_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def get_product(self, product_id: str) -> Product:
        data = self._request("GET", f"/admin/products/{product_id}/with-inventory")
        return self._parse_product(data)

    def create_product(self, payload: Dict[str, Any]) -> Product:
        data = self._request("POST", "/admin/products", json=payload)
        return self._parse_product(data)

    def update_product(self, product_id: str, payload: Dict[str, Any]) -> Product:
        data = self._request("PATCH", f"/admin/products/{product_id}", json=payload)
        return self._parse_product(data)

    # ── Internal helpers ─────────────────────────────────────────

    def _request(self, method: str, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        headers = self.session.auth_headers()
        headers["Content-Type"] = "application/json"

        try:
            response = self._http.request(
                method, f"{self.api_url}{endpoint}", json=json, headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise ApiError(f"Request failed: {e}")

        if not response.is_success:
            message = error_message(response, "Request failed")
            logger.error(f"{method} {endpoint} → {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise ApiError("Response was not valid JSON", status_code=response.status_code)

    @staticmethod
    def _parse_product(data: Any) -> Product:
        # Some endpoints wrap the product: {"product": {...}, "inventory": {...}}
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            data = data["product"]
        try:
            return Product.model_validate(data)
        except PydanticValidationError as e:
            raise ApiError(f"Unexpected product shape: {e.error_count()} invalid field(s)")
