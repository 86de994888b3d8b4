from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

import pytest

from playpub.core.result import Err, Ok, Result
from playpub.services.publish.model import ApiError, Track, UploadRequest

T = TypeVar("T")


@dataclass
class FakePublisher:
    """In-memory PublisherClient that records calls and fails on demand."""

    fail: dict[str, ApiError] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    edit_id: str = "edit-123"
    version_code: int = 42
    track_updates: list[tuple[str, Track, int]] = field(default_factory=list)

    def _answer(self, name: str, value: T) -> Result[T, ApiError]:
        self.calls.append(name)
        if name in self.fail:
            return Err(self.fail[name])
        return Ok(value)

    def create_edit(self, package_name: str) -> Result[str, ApiError]:
        return self._answer("create_edit", self.edit_id)

    def upload_bundle(self, package_name: str, edit_id: str, bundle: Path) -> Result[int, ApiError]:
        return self._answer("upload_bundle", self.version_code)

    def update_track(
        self, package_name: str, edit_id: str, track: Track, version_code: int
    ) -> Result[None, ApiError]:
        self.track_updates.append((edit_id, track, version_code))
        return self._answer("update_track", None)

    def commit_edit(self, package_name: str, edit_id: str) -> Result[str, ApiError]:
        return self._answer("commit_edit", edit_id)

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, ApiError]:
        return self._answer("delete_edit", None)

    def list_generated_apks(self, package_name: str, version_code: int) -> Result[None, ApiError]:
        return self._answer("list_generated_apks", None)


@pytest.fixture
def fake_publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def bundle_file(tmp_path: Path) -> Path:
    path = tmp_path / "app-release.aab"
    path.write_bytes(b"PK\x03\x04fake-bundle")
    return path


@pytest.fixture
def service_account_file(tmp_path: Path) -> Path:
    path = tmp_path / "service-account.json"
    path.write_text('{"type": "service_account"}', encoding="utf-8")
    return path


@pytest.fixture
def upload_request(bundle_file: Path, service_account_file: Path) -> UploadRequest:
    return UploadRequest(
        package_name="com.example.app",
        service_account=service_account_file,
        track=Track.ALPHA,
        bundle=bundle_file,
    )


ConnectFactory = Callable[[FakePublisher], Callable[[Path], Result[FakePublisher, ApiError]]]


@pytest.fixture
def connect_with() -> ConnectFactory:
    """Build a ``connect`` replacement that hands out the given fake."""

    def factory(client: FakePublisher) -> Callable[[Path], Result[FakePublisher, ApiError]]:
        def fake_connect(service_account: Path) -> Result[FakePublisher, ApiError]:
            del service_account
            return Ok(client)

        return fake_connect

    return factory
