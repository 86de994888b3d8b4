from __future__ import annotations

from pathlib import Path

import typer

from playpub import __version__
from playpub.cli.commands.auth_check_cmd import auth_check
from playpub.cli.commands.release_cmd import release_app
from playpub.cli.commands.upload_cmd import run_upload
from playpub.cli.context import build_context
from playpub.core.errors import ErrorCode
from playpub.services.publish.model import Track

HELP = """Upload Android App Bundle (.aab) files to Google Play Console.

Without a command, uploads the bundle given by --aab-file to --track (internal by default).

Example: playpub --aab-file app-release.aab --package-name com.example.myapp --service-account service-account.json --track alpha

Use "playpub auth-check --package-name NAME --service-account PATH" to test authentication only.
"""

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode=None,
    help=HELP,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("auth-check")(auth_check)
app.add_typer(release_app, name="release", help="Release pipeline steps.")


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    aab_file: Path | None = typer.Option(
        None, "--aab-file", help="Path to the Android App Bundle (.aab) file [required for upload]"
    ),
    package_name: str | None = typer.Option(
        None, "--package-name", help="Package name of the Android application [required]"
    ),
    service_account: Path | None = typer.Option(
        None, "--service-account", help="Path to the Google service account JSON file [required]"
    ),
    track: str | None = typer.Option(
        None,
        "--track",
        help=f"Release track ({', '.join(Track.names())}) [default: internal]",
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to a playpub.toml file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if ctx.invoked_subcommand is not None:
        return

    given = (aab_file, package_name, service_account, track, config)
    if all(value is None for value in given):
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.OK))

    cli_ctx = build_context(config)
    run_upload(
        cli_ctx,
        aab_file=aab_file,
        package_name=package_name,
        service_account=service_account,
        track=track,
    )


def main() -> None:
    app()
