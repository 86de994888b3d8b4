from __future__ import annotations

import re
from dataclasses import dataclass

from playpub.core.result import Err, Ok, Result
from playpub.services.release.errors import ReleaseError
from playpub.services.release.model import VersionBump


_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: VersionBump) -> SemVer:
        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


FIRST_RELEASE = SemVer(0, 1, 0)


def parse_version(text: str) -> Result[SemVer, ReleaseError]:
    """Parse a strict ``MAJOR.MINOR.PATCH`` version (no prefix, no pre-release)."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid release version: {text!r}",
                hint="expected MAJOR.MINOR.PATCH, e.g. 1.2.3",
            )
        )
    return Ok(SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3))))
