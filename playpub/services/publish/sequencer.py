"""Publish an app bundle through a Play Console edit.

The publish flow is a small state machine:

    start -> edit_created -> bundle_uploaded -> track_updated -> committed

Once an edit exists, any failing step moves to ``rolling_back`` (a single
best-effort delete of the edit) and then ``failed``. The step error is
always the reported failure; a failed delete is attached as
``rollback_error`` and never replaces it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Literal

from playpub.core.result import Err, Ok, Result
from playpub.output.console import ConsoleProtocol, Style
from playpub.services.publish.client import PublisherClient
from playpub.services.publish.model import ApiError, Track, UploadRequest

PublishState = Literal[
    "start",
    "edit_created",
    "bundle_uploaded",
    "track_updated",
    "committed",
    "rolling_back",
    "failed",
]
PublishStep = Literal["create_edit", "upload_bundle", "update_track", "commit_edit"]


@dataclass(frozen=True, slots=True)
class PublishSession:
    request: UploadRequest
    state: PublishState = "start"
    edit_id: str | None = None
    version_code: int | None = None
    states: tuple[PublishState, ...] = ("start",)

    def advance(
        self,
        state: PublishState,
        *,
        edit_id: str | None = None,
        version_code: int | None = None,
    ) -> PublishSession:
        return replace(
            self,
            state=state,
            edit_id=edit_id if edit_id is not None else self.edit_id,
            version_code=version_code if version_code is not None else self.version_code,
            states=(*self.states, state),
        )


@dataclass(frozen=True, slots=True)
class StepFailed:
    step: PublishStep
    error: ApiError


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    edit_id: str
    version_code: int
    track: Track
    states: tuple[PublishState, ...]


@dataclass(frozen=True, slots=True)
class PublishFailure:
    step: PublishStep
    error: ApiError
    edit_id: str | None
    rollback_error: ApiError | None
    states: tuple[PublishState, ...]

    @property
    def message(self) -> str:
        return f"{self.step.replace('_', ' ')} failed: {self.error.pretty()}"

    @property
    def rollback_attempted(self) -> bool:
        return "rolling_back" in self.states

    @property
    def commit_attempted(self) -> bool:
        """True when the commit call itself failed.

        The remote side may have applied the edit anyway, so the outcome must
        be checked in the Play Console whatever the rollback did.
        """
        return self.step == "commit_edit"


StepHandler = Callable[[PublishSession], Result[PublishSession, StepFailed]]


class PublishSequencer:
    """Drive one edit from creation to commit, rolling back on failure."""

    def __init__(self, *, client: PublisherClient, console: ConsoleProtocol) -> None:
        self._client = client
        self._console = console

    def _handlers(self) -> Mapping[PublishState, StepHandler]:
        return {
            "start": self._create_edit,
            "edit_created": self._upload_bundle,
            "bundle_uploaded": self._update_track,
            "track_updated": self._commit_edit,
        }

    def run(self, request: UploadRequest) -> Result[PublishOutcome, PublishFailure]:
        if request.bundle is None:
            raise ValueError("upload request has no bundle")

        handlers = self._handlers()
        session = PublishSession(request=request)

        while session.state != "committed":
            handler = handlers.get(session.state)
            if handler is None:
                raise AssertionError(f"no handler for publish state: {session.state}")

            stepped = handler(session)
            if isinstance(stepped, Err):
                return Err(self._fail(session, stepped.error))
            session = stepped.value

        assert session.edit_id is not None and session.version_code is not None
        return Ok(
            PublishOutcome(
                edit_id=session.edit_id,
                version_code=session.version_code,
                track=request.track,
                states=session.states,
            )
        )

    # --- steps -----------------------------------------------------------

    def _create_edit(self, session: PublishSession) -> Result[PublishSession, StepFailed]:
        self._console.print("Creating edit...", Style.BOLD)
        created = self._client.create_edit(session.request.package_name)
        if isinstance(created, Err):
            return Err(StepFailed(step="create_edit", error=created.error))

        self._console.print(f"  Edit created: {created.value}", Style.DIM)
        return Ok(session.advance("edit_created", edit_id=created.value))

    def _upload_bundle(self, session: PublishSession) -> Result[PublishSession, StepFailed]:
        request = session.request
        assert request.bundle is not None and session.edit_id is not None

        self._console.print(f"Uploading AAB bundle {request.bundle}...", Style.BOLD)
        uploaded = self._client.upload_bundle(request.package_name, session.edit_id, request.bundle)
        if isinstance(uploaded, Err):
            return Err(StepFailed(step="upload_bundle", error=uploaded.error))

        self._console.print(
            f"  Bundle uploaded successfully. Version code: {uploaded.value}", Style.DIM
        )
        return Ok(session.advance("bundle_uploaded", version_code=uploaded.value))

    def _update_track(self, session: PublishSession) -> Result[PublishSession, StepFailed]:
        request = session.request
        assert session.edit_id is not None and session.version_code is not None

        self._console.print(f'Updating track "{request.track}"...', Style.BOLD)
        updated = self._client.update_track(
            request.package_name, session.edit_id, request.track, session.version_code
        )
        if isinstance(updated, Err):
            return Err(StepFailed(step="update_track", error=updated.error))

        self._console.print(
            f'  Track "{request.track}" updated with version {session.version_code}', Style.DIM
        )
        return Ok(session.advance("track_updated"))

    def _commit_edit(self, session: PublishSession) -> Result[PublishSession, StepFailed]:
        assert session.edit_id is not None

        self._console.print("Committing edit...", Style.BOLD)
        committed = self._client.commit_edit(session.request.package_name, session.edit_id)
        if isinstance(committed, Err):
            return Err(StepFailed(step="commit_edit", error=committed.error))

        return Ok(session.advance("committed", edit_id=committed.value))

    # --- failure path ----------------------------------------------------

    def _fail(self, session: PublishSession, failed: StepFailed) -> PublishFailure:
        if session.edit_id is None:
            # Nothing was created remotely; nothing to roll back.
            return PublishFailure(
                step=failed.step,
                error=failed.error,
                edit_id=None,
                rollback_error=None,
                states=session.advance("failed").states,
            )

        session = session.advance("rolling_back")
        self._console.warning(f"{failed.step} failed, deleting edit {session.edit_id}...")
        deleted = self._client.delete_edit(session.request.package_name, session.edit_id)

        rollback_error: ApiError | None = None
        if isinstance(deleted, Err):
            rollback_error = deleted.error
            self._console.warning(
                f"failed to delete edit {session.edit_id}: {rollback_error.pretty()}"
            )
        else:
            self._console.print("  Edit deleted successfully", Style.DIM)

        return PublishFailure(
            step=failed.step,
            error=failed.error,
            edit_id=session.edit_id,
            rollback_error=rollback_error,
            states=session.advance("failed").states,
        )
