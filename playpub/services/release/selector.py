"""Pick the next release version from conventional-commit titles.

Each commit is classified on its own:

- a ``!:`` anywhere in the title (``feat!: ...``, ``refactor!: ...``) is major
- ``feat:`` is minor
- ``fix:`` is patch
- anything else does not trigger a release

The highest bump across all commits is applied once to the previous version.
"""

from __future__ import annotations

from collections.abc import Sequence

from playpub.core.result import Err, Ok, Result
from playpub.output.console import ConsoleProtocol, Style
from playpub.services.release.errors import ReleaseError
from playpub.services.release.model import BUMP_PRIORITY, CommitRecord, VersionBump
from playpub.services.release.semver import FIRST_RELEASE, SemVer, parse_version

_TITLE_PREVIEW_CHARS = 50


def abbreviate_title(title: str) -> str:
    if len(title) > _TITLE_PREVIEW_CHARS:
        return title[:_TITLE_PREVIEW_CHARS] + "..."
    return title


def classify_commit(title: str) -> VersionBump | None:
    if "!:" in title:
        return "major"
    if title.startswith("feat:"):
        return "minor"
    if title.startswith("fix:"):
        return "patch"
    return None


def highest_bump(bumps: Sequence[VersionBump]) -> VersionBump | None:
    if not bumps:
        return None
    return min(bumps, key=lambda b: BUMP_PRIORITY[b])


def select_next_version(
    previous: str | None,
    commits: Sequence[CommitRecord],
    *,
    console: ConsoleProtocol,
) -> Result[SemVer | None, ReleaseError]:
    """Return the next version, or Ok(None) when no commit warrants a release.

    Without a previous version the first release is always ``0.1.0``,
    whatever the commits say.
    """
    if not previous:
        console.print(f"No last release found, returning first release version {FIRST_RELEASE}.")
        return Ok(FIRST_RELEASE)

    parsed = parse_version(previous)
    if isinstance(parsed, Err):
        return parsed

    bumps: list[VersionBump] = []
    for commit in commits:
        bump = classify_commit(commit.title)
        shown = abbreviate_title(commit.title)
        if bump is None:
            console.print(f"{shown} => does not indicate a release.", Style.DIM)
            continue
        console.print(f"{shown} => indicates a {bump} release.")
        bumps.append(bump)

    chosen = highest_bump(bumps)
    if chosen is None:
        console.print(
            "No commits indicate a release should be made. Exiting without a new release version."
        )
        return Ok(None)

    return Ok(parsed.value.bump(chosen))
