"""
Config Module — Store settings and session context.
"""

from .loader import SessionContext, StoreSettings, get_settings, load_settings, reset_settings

__all__ = [
    "SessionContext",
    "StoreSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
