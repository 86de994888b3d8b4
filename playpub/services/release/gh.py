from __future__ import annotations

import json
import shutil
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.core.structured import as_str_dict, get_bool, get_str
from playpub.platform.process import run as run_process
from playpub.services.release.errors import ReleaseError
from playpub.services.release.model import GithubRelease
from playpub.services.release.timeouts import GH_CREATE_TIMEOUT_SECONDS, GH_TIMEOUT_SECONDS


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def latest_release_cmd() -> list[str]:
    return [
        "gh",
        "release",
        "list",
        "--exclude-drafts",
        "--order",
        "desc",
        "--json",
        "name,isLatest,isPrerelease,tagName",
        "--jq",
        ".[0]",
    ]


def fetch_latest_release(*, repo_root: Path) -> Result[GithubRelease | None, ReleaseError]:
    """Return the newest non-draft release, or None if the repo has none yet."""
    result = run_process(latest_release_cmd(), cwd=repo_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_failed",
                message="gh release list failed",
                hint=result.error.stderr.strip() or None,
            )
        )

    text = result.value.strip()
    if not text:
        return Ok(None)

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"gh release list returned invalid JSON: {e}",
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(ReleaseError(kind="invalid_input", message="unexpected gh release payload"))

    name = get_str(data, "name")
    tag = get_str(data, "tagName")
    if name is None or tag is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="gh release payload is missing name or tagName",
            )
        )

    return Ok(
        GithubRelease(
            name=name,
            tag_name=tag,
            is_latest=get_bool(data, "isLatest") or False,
            is_prerelease=get_bool(data, "isPrerelease") or False,
        )
    )


def create_release(*, repo_root: Path, args: list[str]) -> Result[None, ReleaseError]:
    """Run ``gh <args>``; ``args`` starts with ``release create``."""
    result = run_process(["gh", *args], cwd=repo_root, timeout=GH_CREATE_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_failed",
                message=f"gh release create failed (exit {result.error.returncode})",
                hint=result.error.stderr.strip() or None,
            )
        )
    return Ok(None)
