"""Upload entry point: authenticate, then hand over to the sequencer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from playpub.core.result import Err, Result
from playpub.output.console import ConsoleProtocol, Style
from playpub.services.publish.auth_check import Connect
from playpub.services.publish.model import ApiError, UploadRequest
from playpub.services.publish.sequencer import PublishFailure, PublishOutcome, PublishSequencer


@dataclass(frozen=True, slots=True)
class ConnectFailure:
    error: ApiError

    @property
    def message(self) -> str:
        return f"authentication failed: {self.error.pretty()}"


UploadFailure = ConnectFailure | PublishFailure


def upload_bundle(
    request: UploadRequest,
    *,
    connect: Connect,
    console: ConsoleProtocol,
) -> Result[PublishOutcome, UploadFailure]:
    bundle: Path | None = request.bundle
    console.print("Starting upload process...", Style.BOLD)
    console.print(f"  AAB file: {bundle}", Style.DIM)
    console.print(f"  Package: {request.package_name}", Style.DIM)
    console.print(f"  Track: {request.track}", Style.DIM)
    console.print(f"  Service account: {request.service_account}", Style.DIM)
    console.newline()

    client = connect(request.service_account)
    if isinstance(client, Err):
        return Err(ConnectFailure(error=client.error))

    sequencer = PublishSequencer(client=client.value, console=console)
    return sequencer.run(request)
