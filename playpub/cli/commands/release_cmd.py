"""Release pipeline steps: latest, next and deploy.

Each step reads the runner's JSON input and, where it has a result, writes a
JSON output. "No result" (no prior release, no release needed) is a success
with no output.
"""

from __future__ import annotations

from pathlib import Path

import typer

from playpub.cli.commands._helpers import exit_on_error
from playpub.cli.context import CLIContext, build_context
from playpub.core.errors import ErrorCode
from playpub.services.release.deploy import ReleaseAsset, deploy_release, parse_asset
from playpub.services.release.gh import ensure_gh_available, fetch_latest_release
from playpub.services.release.latest import resolve_latest_release
from playpub.services.release.selector import select_next_version
from playpub.services.release.step_io import STDIO, StepInput, read_step_input, write_step_output

release_app = typer.Typer(add_completion=False, no_args_is_help=True)

_INPUT_HELP = "Step input JSON file ('-' for stdin)"
_OUTPUT_HELP = "Step output JSON file ('-' for stdout)"


def _read_input(ctx: CLIContext, source: str) -> StepInput:
    return exit_on_error(read_step_input(source), ctx, prefix="invalid step input")


@release_app.command("latest")
def latest(
    input_path: str = typer.Option(STDIO, "--input", help=_INPUT_HELP),
    output_path: str = typer.Option(STDIO, "--output", help=_OUTPUT_HELP),
    config: Path | None = typer.Option(None, "--config", help="Path to a playpub.toml file"),
) -> None:
    """Find the latest GitHub release and the commit it tags."""
    ctx = build_context(config, progress_to_stderr=output_path == STDIO)
    step = _read_input(ctx, input_path)
    exit_on_error(ensure_gh_available(), ctx)

    found = exit_on_error(
        resolve_latest_release(
            repo_root=ctx.root,
            commits=step.commits_current_branch,
            console=ctx.console,
            fetch_latest=fetch_latest_release,
        ),
        ctx,
    )
    if found is None:
        return

    exit_on_error(
        write_step_output(
            output_path, {"versionName": found.version_name, "commitSha": found.commit_sha}
        ),
        ctx,
    )


@release_app.command("next")
def next_version(
    input_path: str = typer.Option(STDIO, "--input", help=_INPUT_HELP),
    output_path: str = typer.Option(STDIO, "--output", help=_OUTPUT_HELP),
    config: Path | None = typer.Option(None, "--config", help="Path to a playpub.toml file"),
) -> None:
    """Compute the next semantic version from commits since the last release."""
    ctx = build_context(config, progress_to_stderr=output_path == STDIO)
    step = _read_input(ctx, input_path)

    version = exit_on_error(
        select_next_version(
            step.last_release_version,
            step.commits_since_last_release,
            console=ctx.console,
        ),
        ctx,
    )
    if version is None:
        return

    exit_on_error(write_step_output(output_path, {"version": str(version)}), ctx)


@release_app.command("deploy")
def deploy(
    input_path: str = typer.Option(STDIO, "--input", help=_INPUT_HELP),
    asset: list[str] = typer.Option(
        [], "--asset", help="File to attach, as PATH or PATH#LABEL (repeatable)"
    ),
    version: str | None = typer.Option(
        None, "--version", help="Release version (defaults to the step input's nextVersionName)"
    ),
    target: str | None = typer.Option(None, "--target", help="Branch or commit to tag"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the gh command only"),
    config: Path | None = typer.Option(None, "--config", help="Path to a playpub.toml file"),
) -> None:
    """Create the GitHub release for the computed version."""
    ctx = build_context(config)
    step = _read_input(ctx, input_path)

    release_version = version or step.next_version_name
    if not release_version:
        ctx.console.error("no release version: pass --version or set nextVersionName")
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    assets: list[ReleaseAsset] = [exit_on_error(parse_asset(a), ctx) for a in asset]
    test_mode = dry_run or step.test_mode
    if not test_mode:
        exit_on_error(ensure_gh_available(), ctx)

    exit_on_error(
        deploy_release(
            repo_root=ctx.root,
            version=release_version,
            target=target or ctx.config.release.target,
            assets=assets,
            test_mode=test_mode,
            console=ctx.console,
        ),
        ctx,
    )
