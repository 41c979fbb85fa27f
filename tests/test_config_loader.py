"""
Tests for the settings loader.
"""

import os
from unittest.mock import patch

import pytest

from jewelstore.config import loader
from jewelstore.config.loader import (
    DEFAULT_API_URL,
    DEFAULT_TENANT_ID,
    SessionContext,
    get_settings,
    load_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestLoadSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        assert settings.api_url == DEFAULT_API_URL
        assert settings.tenant_id == DEFAULT_TENANT_ID
        assert settings.token is None
        assert settings.max_image_mb == 2.0

    def test_individual_vars(self):
        with patch.dict(os.environ, {
            "JEWELSTORE_API_URL": "https://api.shop.test/",
            "JEWELSTORE_TOKEN": "tok",
            "JEWELSTORE_TENANT_ID": "acme",
            "JEWELSTORE_MAX_IMAGE_MB": "20",
        }, clear=True):
            settings = load_settings()
        assert settings.api_url == "https://api.shop.test"
        assert settings.token == "tok"
        assert settings.tenant_id == "acme"
        assert settings.max_image_mb == 20.0

    def test_master_config_wins(self):
        with patch.dict(os.environ, {
            "JEWELSTORE_CONFIG": '{"tenant_id": "from-master", "TOKEN": "ignored", "JEWELSTORE_TOKEN": "t"}',
            "JEWELSTORE_TENANT_ID": "from-env",
        }, clear=True):
            settings = load_settings()
        assert settings.tenant_id == "from-master"
        assert settings.token == "t"

    def test_master_config_invalid_json_falls_back(self):
        with patch.dict(os.environ, {
            "JEWELSTORE_CONFIG": "{not json",
            "JEWELSTORE_TENANT_ID": "env-tenant",
        }, clear=True):
            settings = load_settings()
        assert settings.tenant_id == "env-tenant"

    def test_bad_max_mb_ignored(self):
        with patch.dict(os.environ, {"JEWELSTORE_MAX_IMAGE_MB": "lots"}, clear=True):
            settings = load_settings()
        assert settings.max_image_mb == 2.0

    def test_get_settings_cached(self):
        with patch.dict(os.environ, {"JEWELSTORE_TENANT_ID": "one"}, clear=True):
            first = get_settings()
        with patch.dict(os.environ, {"JEWELSTORE_TENANT_ID": "two"}, clear=True):
            assert get_settings() is first
            reset_settings()
            assert get_settings().tenant_id == "two"

    def test_to_env_dict_skips_empty(self):
        with patch.dict(os.environ, {}, clear=True):
            env = load_settings().to_env_dict()
        assert "JEWELSTORE_TOKEN" not in env
        assert env["JEWELSTORE_API_URL"] == DEFAULT_API_URL


class TestSessionContext:
    def test_headers_with_token(self):
        assert SessionContext("abc", "acme").auth_headers() == {
            "x-tenant-id": "acme",
            "Authorization": "Bearer abc",
        }

    def test_headers_without_token(self):
        session = SessionContext(None)
        assert not session.is_authenticated
        assert session.auth_headers() == {"x-tenant-id": "default"}

    def test_from_settings(self):
        with patch.dict(os.environ, {"JEWELSTORE_TOKEN": "x", "JEWELSTORE_TENANT_ID": "t"}, clear=True):
            session = loader.load_settings().session()
        assert session == SessionContext("x", "t")
