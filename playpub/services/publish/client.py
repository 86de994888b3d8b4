"""Google Play Developer Publishing API adapter.

``PublisherClient`` is the seam the sequencer and auth check depend on.
``GooglePlayClient`` implements it on top of ``google-api-python-client``;
every library exception is converted to ``Err(ApiError)`` here so nothing
above this module needs try/except.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, TypeVar

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account as google_service_account
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiClientError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload

from playpub.core.result import Err, Ok, Result
from playpub.core.structured import as_str_dict, get_str
from playpub.services.publish.model import (
    BUNDLE_MIME_TYPE,
    RELEASE_STATUS_COMPLETED,
    ApiError,
    Track,
)

__all__ = [
    "ANDROID_PUBLISHER_SCOPE",
    "GooglePlayClient",
    "PublisherClient",
    "connect",
]

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"

T = TypeVar("T")


class PublisherClient(Protocol):
    """The subset of the publishing API used by this tool."""

    def create_edit(self, package_name: str) -> Result[str, ApiError]:
        """Create a draft edit and return its id."""
        ...

    def upload_bundle(
        self, package_name: str, edit_id: str, bundle: Path
    ) -> Result[int, ApiError]:
        """Stream the bundle into the edit and return its version code."""
        ...

    def update_track(
        self, package_name: str, edit_id: str, track: Track, version_code: int
    ) -> Result[None, ApiError]: ...

    def commit_edit(self, package_name: str, edit_id: str) -> Result[str, ApiError]: ...

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, ApiError]: ...

    def list_generated_apks(
        self, package_name: str, version_code: int
    ) -> Result[None, ApiError]:
        """Read-only probe used by auth-check."""
        ...


def _http_reason(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    if isinstance(reason, str) and reason:
        return reason
    return str(error)


def _call(fn: Callable[[], T]) -> Result[T, ApiError]:
    try:
        return Ok(fn())
    except HttpError as e:
        return Err(ApiError(message=_http_reason(e), status=int(e.resp.status)))
    except (GoogleAuthError, GoogleApiClientError, httplib2.HttpLib2Error, OSError) as e:
        return Err(ApiError(message=str(e) or type(e).__name__))


def _response_dict(response: object, what: str) -> Result[dict[str, object], ApiError]:
    data = as_str_dict(response)
    if data is None:
        return Err(ApiError(message=f"unexpected {what} response"))
    return Ok(data)


class GooglePlayClient:
    """``PublisherClient`` backed by the androidpublisher v3 discovery client."""

    def __init__(self, service: Any) -> None:
        self._service = service

    def create_edit(self, package_name: str) -> Result[str, ApiError]:
        result = _call(
            lambda: self._service.edits().insert(packageName=package_name, body={}).execute()
        )
        if isinstance(result, Err):
            return result

        data = _response_dict(result.value, "edits.insert")
        if isinstance(data, Err):
            return data

        edit_id = get_str(data.value, "id")
        if edit_id is None:
            return Err(ApiError(message="edits.insert response has no edit id"))
        return Ok(edit_id)

    def upload_bundle(
        self, package_name: str, edit_id: str, bundle: Path
    ) -> Result[int, ApiError]:
        def upload() -> object:
            media = MediaFileUpload(str(bundle), mimetype=BUNDLE_MIME_TYPE, resumable=True)
            return (
                self._service.edits()
                .bundles()
                .upload(packageName=package_name, editId=edit_id, media_body=media)
                .execute()
            )

        result = _call(upload)
        if isinstance(result, Err):
            return result

        data = _response_dict(result.value, "edits.bundles.upload")
        if isinstance(data, Err):
            return data

        version_code = data.value.get("versionCode")
        if not isinstance(version_code, int) or isinstance(version_code, bool):
            return Err(ApiError(message="edits.bundles.upload response has no version code"))
        return Ok(version_code)

    def update_track(
        self, package_name: str, edit_id: str, track: Track, version_code: int
    ) -> Result[None, ApiError]:
        body = {
            "track": track.value,
            "releases": [
                {
                    "versionCodes": [str(version_code)],
                    "status": RELEASE_STATUS_COMPLETED,
                }
            ],
        }
        result = _call(
            lambda: self._service.edits()
            .tracks()
            .update(packageName=package_name, editId=edit_id, track=track.value, body=body)
            .execute()
        )
        return result.map(lambda _: None)

    def commit_edit(self, package_name: str, edit_id: str) -> Result[str, ApiError]:
        result = _call(
            lambda: self._service.edits().commit(packageName=package_name, editId=edit_id).execute()
        )
        if isinstance(result, Err):
            return result

        # The commit response echoes the edit; fall back to the id we sent.
        data = as_str_dict(result.value) or {}
        return Ok(get_str(data, "id") or edit_id)

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, ApiError]:
        result = _call(
            lambda: self._service.edits().delete(packageName=package_name, editId=edit_id).execute()
        )
        return result.map(lambda _: None)

    def list_generated_apks(
        self, package_name: str, version_code: int
    ) -> Result[None, ApiError]:
        result = _call(
            lambda: self._service.generatedapks()
            .list(packageName=package_name, versionCode=version_code)
            .execute()
        )
        return result.map(lambda _: None)


def connect(service_account: Path) -> Result[GooglePlayClient, ApiError]:
    """Load service account credentials and build an authenticated client.

    Building the client uses the discovery document bundled with
    ``google-api-python-client``; no request is made until the first call.
    """
    try:
        with service_account.open(encoding="utf-8") as f:
            info: object = json.load(f)
    except OSError as e:
        return Err(ApiError(message=f"cannot read service account file: {e}"))
    except ValueError as e:
        return Err(ApiError(message=f"invalid service account file: {e}"))

    key = as_str_dict(info)
    if key is None:
        return Err(ApiError(message="invalid service account file: expected a JSON object"))

    try:
        credentials = google_service_account.Credentials.from_service_account_info(
            key,
            scopes=[ANDROID_PUBLISHER_SCOPE],
        )
    except ValueError as e:
        return Err(ApiError(message=f"invalid service account file: {e}"))

    service = _call(
        lambda: build("androidpublisher", "v3", credentials=credentials, cache_discovery=False)
    )
    return service.map(GooglePlayClient)
