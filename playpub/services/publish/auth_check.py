from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.output.console import ConsoleProtocol, Style
from playpub.services.publish.client import PublisherClient
from playpub.services.publish.model import ApiError, UploadRequest

# Any version code works: only the response status matters.
PROBE_VERSION_CODE = 1

Connect = Callable[[Path], Result[PublisherClient, ApiError]]


@dataclass(frozen=True, slots=True)
class AuthCheckFailure:
    error: ApiError
    stage: str  # "credentials" or "probe"

    @property
    def message(self) -> str:
        return self.error.pretty()


def check_auth(
    request: UploadRequest,
    *,
    connect: Connect,
    console: ConsoleProtocol,
) -> Result[None, AuthCheckFailure]:
    """Authenticate and make one read-only call; never creates an edit."""
    console.print("Testing authentication...", Style.BOLD)
    console.print(f"  Package: {request.package_name}", Style.DIM)
    console.print(f"  Service account: {request.service_account}", Style.DIM)

    client = connect(request.service_account)
    if isinstance(client, Err):
        return Err(AuthCheckFailure(error=client.error, stage="credentials"))

    console.print("Calling Google Play Console API...", Style.BOLD)
    probe = client.value.list_generated_apks(request.package_name, PROBE_VERSION_CODE)
    if isinstance(probe, Err):
        return Err(AuthCheckFailure(error=probe.error, stage="probe"))

    return Ok(None)
