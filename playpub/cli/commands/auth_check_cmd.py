from __future__ import annotations

from pathlib import Path

import typer

from playpub.cli.commands._helpers import exit_with_code
from playpub.cli.commands.upload_cmd import resolve_request
from playpub.cli.context import build_context
from playpub.core.errors import ErrorCode
from playpub.core.result import Err
from playpub.services.publish.auth_check import check_auth
from playpub.services.publish.client import connect


def auth_check(
    package_name: str | None = typer.Option(
        None, "--package-name", help="Package name of the Android application [required]"
    ),
    service_account: Path | None = typer.Option(
        None, "--service-account", help="Path to the Google service account JSON file [required]"
    ),
    track: str | None = typer.Option(
        None, "--track", help="Release track (validated, not used by the check)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to a playpub.toml file"),
) -> None:
    """Test authentication with the Google Play Console API."""
    ctx = build_context(config)
    request = resolve_request(
        ctx,
        aab_file=None,
        package_name=package_name,
        service_account=service_account,
        track=track,
        auth_check=True,
    )

    result = check_auth(request, connect=connect, console=ctx.console)
    if isinstance(result, Err):
        ctx.console.error(f"Authentication check failed: {result.error.message}")
        exit_with_code(int(ErrorCode.FAILURE))

    ctx.console.success("Authentication successful!")
    ctx.console.print("  Successfully connected to Google Play Console API")
