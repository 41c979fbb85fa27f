"""
Jewelstore Media — CLI Entry Point

Usage:
    jewelstore validate PATH...
    jewelstore compress PATH [--max-mb N] [--out PATH]
    jewelstore upload PATH... --folder products [--no-compress]
    jewelstore delete URL
    jewelstore cdn-url URL [--width N]
    jewelstore config-status
"""

from __future__ import annotations

# Load .env file FIRST, before any other imports that might read env vars
from pathlib import Path
from dotenv import load_dotenv

_project_root = Path(__file__).parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import click

from .cli.config import config_status
from .cli.media import cdn_url, compress, delete, upload, validate
from .config.loader import load_settings
from .logging_config import bind_tenant, setup_logging

setup_logging()


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Jewelstore Media — prepare and publish storefront media."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings()
    bind_tenant(ctx.obj["settings"].tenant_id)


cli.add_command(validate)
cli.add_command(compress)
cli.add_command(upload)
cli.add_command(delete)
cli.add_command(cdn_url)
cli.add_command(config_status)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
