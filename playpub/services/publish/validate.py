from __future__ import annotations

import os
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.services.publish.model import (
    DEFAULT_TRACK,
    Track,
    UploadRequest,
    ValidationError,
)

_USAGE_HINT = "Use --help for usage information"


def _readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def validate_upload_request(
    *,
    bundle: Path | None,
    package_name: str | None,
    service_account: Path | None,
    track: str | None,
    auth_check: bool = False,
) -> Result[UploadRequest, ValidationError]:
    """Check every input before any remote call is made.

    Required arguments are checked first, then the track, then the files on
    disk. The bundle is only required (and only checked) for uploads.
    """
    if not auth_check and bundle is None:
        return Err(
            ValidationError(
                kind="missing_argument",
                message="--aab-file is required",
                hint=_USAGE_HINT,
            )
        )

    if not package_name or not package_name.strip():
        return Err(
            ValidationError(
                kind="missing_argument",
                message="--package-name is required",
                hint=_USAGE_HINT,
            )
        )

    if service_account is None:
        return Err(
            ValidationError(
                kind="missing_argument",
                message="--service-account is required",
                hint=_USAGE_HINT,
            )
        )

    resolved_track = DEFAULT_TRACK
    if track is not None:
        parsed = Track.parse(track)
        if parsed is None:
            return Err(
                ValidationError(
                    kind="invalid_track",
                    message=f'Invalid track "{track}". Must be one of: '
                    + ", ".join(Track.names()),
                )
            )
        resolved_track = parsed

    if not auth_check and bundle is not None and not _readable_file(bundle):
        return Err(
            ValidationError(
                kind="artifact_not_found",
                message=f"AAB file not found: {bundle}",
            )
        )

    if not _readable_file(service_account):
        return Err(
            ValidationError(
                kind="credential_not_found",
                message=f"Service account JSON file not found: {service_account}",
            )
        )

    return Ok(
        UploadRequest(
            package_name=package_name.strip(),
            service_account=service_account,
            track=resolved_track,
            bundle=None if auth_check else bundle,
        )
    )
