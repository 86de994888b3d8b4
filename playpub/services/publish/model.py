from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Literal


class Track(StrEnum):
    """Google Play release tracks an upload can target."""

    INTERNAL = "internal"
    ALPHA = "alpha"
    BETA = "beta"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> Track | None:
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(t.value for t in cls)


DEFAULT_TRACK = Track.INTERNAL

# Full rollout; staged percentages are not supported.
RELEASE_STATUS_COMPLETED = "completed"
BUNDLE_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """A validated upload (or auth-check) request.

    ``bundle`` is None only for auth-check requests.
    """

    package_name: str
    service_account: Path
    track: Track = DEFAULT_TRACK
    bundle: Path | None = None


ValidationErrorKind = Literal[
    "missing_argument",
    "artifact_not_found",
    "credential_not_found",
    "invalid_track",
]


@dataclass(frozen=True, slots=True)
class ValidationError:
    kind: ValidationErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ApiError:
    """A failed call to the publishing API (or credential exchange).

    ``status`` is the HTTP status when the server answered, else None.
    """

    message: str
    status: int | None = None

    def pretty(self) -> str:
        if self.status is not None:
            return f"{self.status} {self.message}"
        return self.message
