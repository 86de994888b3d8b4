"""JSON input/output for the release pipeline steps.

The runner hands each step a JSON object (camelCase keys) and reads back a
JSON object. A step that has nothing to report writes nothing at all.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_list,
    get_str,
    get_str_list,
    get_table,
)
from playpub.services.release.errors import ReleaseError
from playpub.services.release.model import CommitRecord

STDIO = "-"


@dataclass(frozen=True, slots=True)
class StepInput:
    last_release_version: str | None = None
    commits_since_last_release: tuple[CommitRecord, ...] = ()
    commits_current_branch: tuple[CommitRecord, ...] = ()
    next_version_name: str | None = None
    test_mode: bool = False


def _parse_commits(
    data: Mapping[str, object], key: str
) -> Result[tuple[CommitRecord, ...], ReleaseError]:
    raw = get_list(data, key)
    if raw is None:
        return Ok(())

    commits: list[CommitRecord] = []
    for index, item in enumerate(raw):
        d = as_str_dict(item)
        if d is None:
            return Err(ReleaseError(kind="invalid_input", message=f"{key}[{index}] is not an object"))
        sha = get_str(d, "sha")
        if sha is None:
            return Err(ReleaseError(kind="invalid_input", message=f"{key}[{index}] has no sha"))
        title = d.get("title")
        commits.append(
            CommitRecord(
                title=title if isinstance(title, str) else "",
                sha=sha,
                tags=tuple(get_str_list(d, "tags")),
            )
        )
    return Ok(tuple(commits))


def parse_step_input(data: Mapping[str, object]) -> Result[StepInput, ReleaseError]:
    last_release: StrDict = get_table(data, "lastRelease") or {}

    since = _parse_commits(data, "gitCommitsSinceLastRelease")
    if isinstance(since, Err):
        return since
    branch = _parse_commits(data, "gitCommitsCurrentBranch")
    if isinstance(branch, Err):
        return branch

    return Ok(
        StepInput(
            last_release_version=get_str(last_release, "versionName"),
            commits_since_last_release=since.value,
            commits_current_branch=branch.value,
            next_version_name=get_str(data, "nextVersionName"),
            test_mode=get_bool(data, "testMode") or False,
        )
    )


def read_step_input(source: str) -> Result[StepInput, ReleaseError]:
    """Read step input from a file path, or stdin when ``source`` is ``-``."""
    try:
        text = sys.stdin.read() if source == STDIO else Path(source).read_text(encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"cannot read step input: {e}"))

    if not text.strip():
        return Ok(StepInput())

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"step input is not valid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ReleaseError(kind="invalid_input", message="step input must be a JSON object"))
    return parse_step_input(data)


def write_step_output(target: str, payload: Mapping[str, object]) -> Result[None, ReleaseError]:
    text = json.dumps(dict(payload), indent=2) + "\n"
    if target == STDIO:
        sys.stdout.write(text)
        sys.stdout.flush()
        return Ok(None)

    try:
        Path(target).write_text(text, encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"cannot write step output: {e}"))
    return Ok(None)
