"""
CLI config commands — show which settings are in effect.

Usage:
    jewelstore config-status [--json]
"""

from __future__ import annotations

import click


@click.command("config-status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_status(ctx: click.Context, as_json: bool) -> None:
    """Show the API, tenant, storage and token settings."""
    import json as json_lib

    settings = ctx.obj["settings"]

    if as_json:
        data = {
            "api_url": settings.api_url,
            "tenant_id": settings.tenant_id,
            "bucket_url": settings.bucket_url,
            "cdn_host": settings.cdn_host,
            "max_image_mb": settings.max_image_mb,
            "token_configured": settings.has_token(),
        }
        click.echo(json_lib.dumps(data, indent=2))
        return

    click.echo("\n📋 Store Configuration\n")
    click.echo(f"  API URL:      {settings.api_url}")
    click.echo(f"  Tenant:       {settings.tenant_id}")
    click.echo(f"  Bucket:       {settings.bucket_url}")
    click.echo(f"  CDN host:     {settings.cdn_host}")
    click.echo(f"  Image target: {settings.max_image_mb:g} MB")
    if settings.has_token():
        click.secho("  Token:        ✓ configured", fg="green")
    else:
        click.secho("  Token:        ✗ not set (JEWELSTORE_TOKEN)", fg="yellow")
    click.echo()
