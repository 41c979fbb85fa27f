"""
Tests for CLI media commands — validate, compress, upload, delete, cdn-url.

Uses Click's CliRunner with settings and an httpx mock client injected
through the context object.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from jewelstore.config.loader import StoreSettings
from jewelstore.main import cli
from tests.conftest import API_URL, CDN_BASE, Recorder, make_image_bytes, upload_ok_handler


def _run(args: list, settings: StoreSettings, http_client: httpx.Client | None = None):
    runner = CliRunner()
    obj = {"settings": settings, "http_client": http_client}
    return runner.invoke(cli, args, obj=obj, catch_exceptions=False)


@pytest.fixture
def settings() -> StoreSettings:
    return StoreSettings(api_url=API_URL, token="tok", tenant_id="acme")


@pytest.fixture
def ring_png(tmp_path: Path) -> Path:
    path = tmp_path / "ring.png"
    path.write_bytes(make_image_bytes(2400, 1200))
    return path


class TestValidateCommand:
    def test_valid_and_invalid(self, tmp_path, settings, ring_png):
        bad = tmp_path / "notes.txt"
        bad.write_text("hello")

        result = _run(["validate", str(ring_png), str(bad)], settings)
        assert result.exit_code == 1
        assert "✓ ring.png" in result.output
        assert "✗ notes.txt" in result.output

    def test_all_valid(self, settings, ring_png):
        assert _run(["validate", str(ring_png)], settings).exit_code == 0


class TestCompressCommand:
    def test_writes_webp(self, settings, ring_png):
        from PIL import Image

        result = _run(["compress", str(ring_png)], settings)
        assert result.exit_code == 0

        out = ring_png.with_suffix(".webp")
        assert out.exists()
        assert Image.open(out).size == (1920, 960)

    def test_custom_output(self, tmp_path, settings, ring_png):
        out = tmp_path / "small.webp"
        result = _run(["compress", str(ring_png), "--out", str(out)], settings)
        assert result.exit_code == 0
        assert out.exists()

    def test_failure_exit_code(self, tmp_path, settings):
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"nope")
        result = _run(["compress", str(broken)], settings)
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestUploadCommand:
    def test_prints_urls_in_order(self, tmp_path, settings):
        paths = []
        for name in ("a.png", "b.png"):
            p = tmp_path / name
            p.write_bytes(make_image_bytes(40, 40))
            paths.append(str(p))

        rec = Recorder(upload_ok_handler)
        result = _run(["upload", *paths, "--folder", "products"], settings, rec.client())

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[-2:] == [f"{CDN_BASE}/products/a.webp", f"{CDN_BASE}/products/b.webp"]
        assert "50%" in result.output
        assert rec.count == 2

    def test_no_compress_keeps_original(self, settings, ring_png):
        rec = Recorder(upload_ok_handler)
        result = _run(["upload", str(ring_png), "--no-compress"], settings, rec.client())
        assert result.exit_code == 0
        assert result.output.strip().endswith("/products/ring.png")

    def test_missing_token(self, ring_png):
        rec = Recorder(upload_ok_handler)
        result = _run(["upload", str(ring_png)], StoreSettings(api_url=API_URL), rec.client())
        assert result.exit_code == 1
        assert "Authentication required" in result.output
        assert rec.count == 0

    def test_invalid_folder(self, settings, ring_png):
        runner = CliRunner()
        result = runner.invoke(cli, ["upload", str(ring_png), "--folder", "secrets"], obj={"settings": settings})
        assert result.exit_code == 2


class TestDeleteCommand:
    def test_delete_ok(self, settings):
        rec = Recorder(upload_ok_handler)
        result = _run(["delete", f"{CDN_BASE}/products/a.webp"], settings, rec.client())
        assert result.exit_code == 0
        assert "Deleted" in result.output

    def test_delete_foreign_url(self, settings):
        rec = Recorder(upload_ok_handler)
        result = _run(["delete", "https://elsewhere.test/a.webp"], settings, rec.client())
        assert result.exit_code == 1
        assert rec.count == 0


class TestCdnUrlCommand:
    def test_rewrites(self, settings):
        result = _run(["cdn-url", f"{CDN_BASE}/a.jpg", "--width", "320"], settings)
        assert result.output.strip() == f"{CDN_BASE}/a.jpg?width=320&quality=85&format=webp"

    def test_video_passthrough(self, settings):
        result = _run(["cdn-url", f"{CDN_BASE}/a.mp4"], settings)
        assert result.output.strip() == f"{CDN_BASE}/a.mp4"


class TestConfigStatus:
    def test_json(self, settings):
        result = _run(["config-status", "--json"], settings)
        data = json.loads(result.output)
        assert data["tenant_id"] == "acme"
        assert data["token_configured"] is True

    def test_human(self):
        result = _run(["config-status"], StoreSettings())
        assert "not set" in result.output


class TestConfiguredBucket:
    def test_bucket_path_resolved_from_env(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["cdn-url", "products/ring.jpg", "--width", "400"],
            obj={},
            env={
                "JEWELSTORE_CONFIG": None,
                "JEWELSTORE_CDN_HOST": None,
                "JEWELSTORE_BUCKET_URL": "https://shop-media.nyc3.digitaloceanspaces.com",
            },
            catch_exceptions=False,
        )
        assert result.output.strip() == (
            "https://shop-media.nyc3.digitaloceanspaces.com/products/ring.jpg"
            "?width=400&quality=85&format=webp"
        )

    def test_bucket_path_default(self, settings):
        result = _run(["cdn-url", "banners/hero.jpg"], settings)
        assert result.output.strip() == f"{CDN_BASE}/banners/hero.jpg?quality=85&format=webp"


class TestOversizedImages:
    @pytest.fixture(autouse=True)
    def _low_pixel_limit(self, monkeypatch):
        from PIL import Image

        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10_000)

    def test_compress_reports_error(self, tmp_path, settings):
        path = tmp_path / "huge.png"
        path.write_bytes(make_image_bytes(300, 300))
        result = _run(["compress", str(path)], settings)
        assert result.exit_code == 1
        assert "too many pixels" in result.output

    def test_upload_reports_error_without_sending(self, tmp_path, settings):
        path = tmp_path / "huge.png"
        path.write_bytes(make_image_bytes(300, 300))
        rec = Recorder(upload_ok_handler)
        result = _run(["upload", str(path)], settings, rec.client())
        assert result.exit_code == 1
        assert "too many pixels" in result.output
        assert rec.count == 0


class TestUploadHousekeeping:
    def test_invalid_file_named_in_error(self, tmp_path, settings):
        bad = tmp_path / "notes.txt"
        bad.write_text("hello")
        rec = Recorder(upload_ok_handler)
        result = _run(["upload", str(bad)], settings, rec.client())
        assert result.exit_code == 1
        assert "Error: notes.txt: Only JPEG" in result.output
        assert rec.count == 0

    def test_http_client_closed_after_upload(self, settings, ring_png):
        client = Recorder(upload_ok_handler).client()
        _run(["upload", str(ring_png)], settings, client)
        assert client.is_closed

    def test_http_client_closed_after_delete(self, settings):
        client = Recorder(upload_ok_handler).client()
        _run(["delete", f"{CDN_BASE}/products/a.webp"], settings, client)
        assert client.is_closed
