from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


VersionBump = Literal["major", "minor", "patch"]

# Lower value wins when commits disagree.
BUMP_PRIORITY: dict[VersionBump, int] = {"major": 0, "minor": 1, "patch": 2}


@dataclass(frozen=True, slots=True)
class CommitRecord:
    title: str
    sha: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GithubRelease:
    name: str
    tag_name: str
    is_latest: bool = False
    is_prerelease: bool = False


@dataclass(frozen=True, slots=True)
class LatestRelease:
    version_name: str
    tag_name: str
    commit_sha: str
