from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.output.console import ConsoleProtocol
from playpub.services.release.errors import ReleaseError
from playpub.services.release.gh import fetch_latest_release
from playpub.services.release.model import CommitRecord, GithubRelease, LatestRelease

FetchLatest = Callable[..., Result[GithubRelease | None, ReleaseError]]


def find_tagged_commit(commits: Sequence[CommitRecord], tag: str) -> CommitRecord | None:
    return next((c for c in commits if tag in c.tags), None)


def resolve_latest_release(
    *,
    repo_root: Path,
    commits: Sequence[CommitRecord],
    console: ConsoleProtocol,
    fetch_latest: FetchLatest = fetch_latest_release,
) -> Result[LatestRelease | None, ReleaseError]:
    """Find the latest release and the commit on this branch that it tags.

    Ok(None) means no release exists yet, so the next one is the first.
    """
    fetched = fetch_latest(repo_root=repo_root)
    if isinstance(fetched, Err):
        return fetched

    release = fetched.value
    if release is None:
        console.print("No releases found; the next release will be the first.")
        return Ok(None)

    console.print(f"latest release found: {release.name} ({release.tag_name})")

    commit = find_tagged_commit(commits, release.tag_name)
    if commit is None:
        return Err(
            ReleaseError(
                kind="commit_not_found",
                message=f"no commit on the current branch is tagged {release.tag_name}",
                hint="fetch tags before running this step (git fetch --tags)",
            )
        )

    console.print(f"commit matching release found: {commit.title} ({commit.sha})")
    return Ok(
        LatestRelease(
            version_name=release.name,
            tag_name=release.tag_name,
            commit_sha=commit.sha,
        )
    )
