"""
Logging Configuration — Tenant-aware structured logging.

Every log line from the media tooling says which storefront tenant it was
for. The CLI binds the tenant once from settings; records that already
carry a `tenant_id` extra (the upload client sets one) keep their own.

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: json, text (default: text)

## Usage

    from jewelstore.logging_config import bind_tenant, setup_logging

    setup_logging()          # once at startup
    bind_tenant("acme")      # after settings are loaded
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class TenantFilter(logging.Filter):
    """Stamp the bound tenant onto records that don't name one."""

    def __init__(self, tenant_id: Optional[str] = None):
        super().__init__()
        self.tenant_id = tenant_id

    def filter(self, record: logging.LogRecord) -> bool:
        if self.tenant_id and not hasattr(record, "tenant_id"):
            record.tenant_id = self.tenant_id
        return True


_tenant_filter = TenantFilter()


def bind_tenant(tenant_id: Optional[str]) -> None:
    """Set the tenant stamped on subsequent log records (None to unbind)."""
    _tenant_filter.tenant_id = tenant_id


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line, for batch uploads run from scripts.

    {"ts": "...", "level": "...", "logger": "...", "message": "...",
     "tenant_id": "...", "folder": "...", "url": "..."}
    """

    EXTRA_FIELDS = ("tenant_id", "folder", "url")

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(
            (name, getattr(record, name))
            for name in self.EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Terminal output:

    12:34:56 INFO    [upload         ] Uploaded ring.webp [tenant=acme]
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:7}"
        if sys.stderr.isatty():
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        module = record.name.rsplit(".", 1)[-1][:15]
        line = f"{datetime.now():%H:%M:%S} {level} [{module:15}] {record.getMessage()}"

        tenant = getattr(record, "tenant_id", None)
        if tenant:
            line += f" [tenant={tenant}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    tenant_id: str | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Defaults to LOG_LEVEL or INFO.
        format_type: json or text. Defaults to LOG_FORMAT or text.
        tenant_id: Tenant to stamp on records; leaves the current binding
                   alone when None.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    numeric_level = getattr(logging, log_level, logging.INFO)

    if tenant_id is not None:
        bind_tenant(tenant_id)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if log_format == "json" else HumanFormatter())
    handler.setLevel(numeric_level)
    handler.addFilter(_tenant_filter)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Request-level chatter from the HTTP and imaging stacks
    for noisy in ("httpx", "httpcore", "PIL"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )
