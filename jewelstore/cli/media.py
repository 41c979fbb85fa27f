"""
CLI media commands — validate, compress, upload, delete, and CDN URLs.

Usage:
    jewelstore validate photo.jpg clip.mp4
    jewelstore compress photo.png [--max-mb 2] [--out photo.webp]
    jewelstore upload a.jpg b.jpg --folder products [--no-compress]
    jewelstore delete https://bucket.sgp1.digitaloceanspaces.com/products/a.webp
    jewelstore cdn-url URL-OR-PATH [--width 400] [--quality 85] [--format webp]
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import click

from ..models.media import MediaFile, UploadFolder
from ..validation import MediaError, validate_media_file

FOLDER_CHOICES = [f.value for f in UploadFolder]


def _make_uploader(ctx: click.Context):
    from ..media.upload import UploadClient

    settings = ctx.obj["settings"]
    return UploadClient(
        settings.session(),
        settings.api_url,
        cdn_host=settings.cdn_host,
        http_client=ctx.obj.get("http_client"),
    )


@click.command("validate")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(paths: Tuple[Path, ...]) -> None:
    """Check files against the upload type and size rules."""
    failures = 0
    for path in paths:
        result = validate_media_file(MediaFile.from_path(path))
        if result.valid:
            click.secho(f"  ✓ {path.name}", fg="green")
        else:
            failures += 1
            click.secho(f"  ✗ {path.name}", fg="red", nl=False)
            click.echo(f" — {result.error}")

    if failures:
        raise SystemExit(1)


@click.command("compress")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max-mb", type=float, default=None, help="Target size in MB (default from settings)")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Output file (default: <name>.webp next to the input)")
@click.pass_context
def compress(ctx: click.Context, path: Path, max_mb: float, out_path: Path) -> None:
    """Compress an image to WebP under a size target."""
    from ..media.compress import compress_image

    settings = ctx.obj["settings"]
    max_mb = max_mb or settings.max_image_mb

    source = MediaFile.from_path(path)
    try:
        result = compress_image(source, max_mb)
    except MediaError as e:
        click.secho(f"Error: {e.message}", fg="red")
        raise SystemExit(1)

    target = out_path or path.with_suffix(".webp")
    if result is source and target.resolve() == path.resolve():
        click.echo(f"  {path.name} is already WebP under {max_mb:g}MB — unchanged")
        return

    target.write_bytes(result.data)
    click.secho(f"  ✓ {path.name} → {target.name}", fg="green", nl=False)
    click.echo(f" ({source.size:,} → {result.size:,} bytes)")


@click.command("upload")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folder", "-f", type=click.Choice(FOLDER_CHOICES), default="products", help="Destination folder")
@click.option("--no-compress", is_flag=True, help="Upload images without compressing")
@click.option("--max-mb", type=float, default=None, help="Image size target in MB")
@click.pass_context
def upload(ctx: click.Context, paths: Tuple[Path, ...], folder: str, no_compress: bool, max_mb: float) -> None:
    """Validate, compress and upload files, printing their public URLs."""
    from ..media.pipeline import prepare_file
    from ..validation import FileValidationError

    settings = ctx.obj["settings"]
    max_mb = max_mb or settings.max_image_mb

    def _progress(percent: int) -> None:
        click.echo(f"  … {percent}%")

    try:
        files = [prepare_file(MediaFile.from_path(p), max_mb, compress=not no_compress) for p in paths]
        with _make_uploader(ctx) as uploader:
            urls = uploader.upload_many(files, folder, on_progress=_progress if len(files) > 1 else None)
    except FileValidationError as e:
        click.secho(f"Error: {e.details.get('filename')}: {e.message}", fg="red")
        raise SystemExit(1)
    except MediaError as e:
        click.secho(f"Error: {e.message}", fg="red")
        raise SystemExit(1)

    for url in urls:
        click.echo(url)


@click.command("delete")
@click.argument("url")
@click.pass_context
def delete(ctx: click.Context, url: str) -> None:
    """Remove a stored object by its public URL."""
    with _make_uploader(ctx) as uploader:
        deleted = uploader.delete(url)
    if deleted:
        click.secho(f"  ✓ Deleted {url}", fg="green")
    else:
        click.secho(f"  ✗ Could not delete {url} (see log)", fg="yellow")
        raise SystemExit(1)


@click.command("cdn-url")
@click.argument("url")
@click.option("--width", "-w", type=int, default=None, help="Target width in px")
@click.option("--quality", "-q", type=int, default=85, show_default=True)
@click.option("--format", "fmt", default="webp", show_default=True)
@click.pass_context
def cdn_url(ctx: click.Context, url: str, width: int, quality: int, fmt: str) -> None:
    """Print the CDN-optimized variant of an image URL or bucket path."""
    from ..media.cdn import get_cdn_optimized_url, resolve_image_url

    settings = ctx.obj["settings"]
    full_url = resolve_image_url(url, bucket_url=settings.bucket_url)
    click.echo(get_cdn_optimized_url(full_url, width, quality, fmt, cdn_host=settings.cdn_host))
