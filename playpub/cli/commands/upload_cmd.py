from __future__ import annotations

from pathlib import Path

from playpub.cli.commands._helpers import exit_on_error, exit_with_code
from playpub.cli.context import CLIContext
from playpub.core.errors import ErrorCode
from playpub.core.result import Err, Ok
from playpub.output.console import Style
from playpub.services.publish.client import connect
from playpub.services.publish.model import UploadRequest
from playpub.services.publish.sequencer import PublishFailure, PublishOutcome
from playpub.services.publish.upload import upload_bundle
from playpub.services.publish.validate import validate_upload_request


def resolve_request(
    ctx: CLIContext,
    *,
    aab_file: Path | None,
    package_name: str | None,
    service_account: Path | None,
    track: str | None,
    auth_check: bool,
) -> UploadRequest:
    """Merge flags over config defaults and validate before any remote call."""
    defaults = ctx.config.upload
    result = validate_upload_request(
        bundle=aab_file,
        package_name=package_name if package_name is not None else defaults.package_name,
        service_account=(
            service_account if service_account is not None else defaults.service_account
        ),
        track=track if track is not None else defaults.track,
        auth_check=auth_check,
    )
    return exit_on_error(result, ctx, ErrorCode.FAILURE)


def run_upload(
    ctx: CLIContext,
    *,
    aab_file: Path | None,
    package_name: str | None,
    service_account: Path | None,
    track: str | None,
) -> None:
    request = resolve_request(
        ctx,
        aab_file=aab_file,
        package_name=package_name,
        service_account=service_account,
        track=track,
        auth_check=False,
    )

    match upload_bundle(request, connect=connect, console=ctx.console):
        case Ok(outcome):
            _print_success(ctx, outcome)
        case Err(failure):
            ctx.console.error(f"Upload failed: {failure.message}")
            if isinstance(failure, PublishFailure):
                _print_rollback_notes(ctx, failure)
            exit_with_code(int(ErrorCode.FAILURE))


def _print_success(ctx: CLIContext, outcome: PublishOutcome) -> None:
    console = ctx.console
    console.newline()
    console.success("Upload completed successfully!")
    console.print(f"  Edit ID: {outcome.edit_id}", Style.DIM)
    console.print(
        f'  Version code {outcome.version_code} is now available on the "{outcome.track}" track'
    )
    console.newline()
    console.header("Next steps")
    console.print("  1. Go to Google Play Console")
    console.print("  2. Review the release details")
    console.print("  3. Add release notes (if needed)")
    console.print("  4. Roll out the release to users")


def _print_rollback_notes(ctx: CLIContext, failure: PublishFailure) -> None:
    console = ctx.console
    if failure.rollback_error is not None:
        console.warning(
            f"rollback failed: {failure.rollback_error.pretty()}; "
            f"edit {failure.edit_id} may need to be discarded in Google Play Console"
        )
    if failure.commit_attempted:
        console.warning(
            f"the commit of edit {failure.edit_id} failed; it may have been applied anyway"
        )
        console.hint("check the track in Google Play Console before re-running")
