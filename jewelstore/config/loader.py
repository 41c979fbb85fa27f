"""
Config Loader — Load store settings from a master key or individual env vars.

Supports two modes:
1. Master JSON key: Single JEWELSTORE_CONFIG env var with all settings
2. Individual keys: Separate env vars for each setting (fallback)

## Usage

    # Option 1: Master config
    export JEWELSTORE_CONFIG='{"api_url": "https://api.example.com", "tenant_id": "acme"}'

    # Option 2: Individual keys
    export JEWELSTORE_API_URL="https://api.example.com"
    export JEWELSTORE_TOKEN="eyJ..."
    export JEWELSTORE_TENANT_ID="acme"

The loader reads the master config first, then fills gaps from individual keys.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

MASTER_ENV_VAR = "JEWELSTORE_CONFIG"

DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_TENANT_ID = "default"
DEFAULT_BUCKET_URL = "https://jewelstore.sgp1.digitaloceanspaces.com"
DEFAULT_CDN_HOST = "digitaloceanspaces.com"
DEFAULT_MAX_IMAGE_MB = 2.0

# field name → individual env var
_ENV_VARS = {
    "api_url": "JEWELSTORE_API_URL",
    "token": "JEWELSTORE_TOKEN",
    "tenant_id": "JEWELSTORE_TENANT_ID",
    "bucket_url": "JEWELSTORE_BUCKET_URL",
    "cdn_host": "JEWELSTORE_CDN_HOST",
    "max_image_mb": "JEWELSTORE_MAX_IMAGE_MB",
}


@dataclass(frozen=True)
class SessionContext:
    """Credential and tenant for one admin session."""

    token: Optional[str]
    tenant_id: str = DEFAULT_TENANT_ID

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        headers = {"x-tenant-id": self.tenant_id}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


@dataclass
class StoreSettings:
    """All store settings in one place."""

    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None
    tenant_id: str = DEFAULT_TENANT_ID
    bucket_url: str = DEFAULT_BUCKET_URL
    cdn_host: str = DEFAULT_CDN_HOST
    max_image_mb: float = DEFAULT_MAX_IMAGE_MB

    def has_token(self) -> bool:
        return bool(self.token)

    def session(self) -> SessionContext:
        return SessionContext(token=self.token, tenant_id=self.tenant_id)

    def to_env_dict(self) -> Dict[str, str]:
        """Convert to environment variable format."""
        mapping = {env: getattr(self, name) for name, env in _ENV_VARS.items()}
        return {k: str(v) for k, v in mapping.items() if v}


def load_settings() -> StoreSettings:
    """
    Load settings from the master key, then individual env vars.

    Priority:
    1. JEWELSTORE_CONFIG (master JSON)
    2. Individual environment variables
    3. Defaults
    """
    values: Dict[str, Any] = {}

    master_config = os.environ.get(MASTER_ENV_VAR)
    if master_config:
        try:
            values = _parse_master_config(json.loads(master_config))
            logger.info(f"Loaded configuration from {MASTER_ENV_VAR}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid {MASTER_ENV_VAR} JSON: {e}")
        except AttributeError:
            logger.error(f"{MASTER_ENV_VAR} must be a JSON object")

    for name, env in _ENV_VARS.items():
        if values.get(name) is None and os.environ.get(env):
            values[name] = os.environ[env]

    if "max_image_mb" in values:
        try:
            values["max_image_mb"] = float(values["max_image_mb"])
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid max_image_mb: {values['max_image_mb']!r}")
            del values["max_image_mb"]

    if "api_url" in values:
        values["api_url"] = str(values["api_url"]).rstrip("/")

    return StoreSettings(**values)


def _parse_master_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept both snake_case and env-style keys in the master JSON."""
    parsed = {}
    for name, env in _ENV_VARS.items():
        value = data.get(name)
        if value is None:
            value = data.get(env)
        if value is not None:
            parsed[name] = value
    return parsed


# Global settings instance (loaded on first access)
_settings: Optional[StoreSettings] = None


def get_settings() -> StoreSettings:
    """Get the global settings (loads on first access)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next access reloads them."""
    global _settings
    _settings = None
