from __future__ import annotations

import shlex
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from playpub.core.result import Err, Ok, Result
from playpub.output.console import ConsoleProtocol, Style
from playpub.services.release.errors import ReleaseError
from playpub.services.release.gh import create_release

CreateRelease = Callable[..., Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """A file attached to the GitHub release, shown under ``label``."""

    path: Path
    label: str

    def to_arg(self) -> str:
        return f"{self.path}#{self.label}"


def parse_asset(text: str) -> Result[ReleaseAsset, ReleaseError]:
    """Parse ``path`` or ``path#label``; the label defaults to the file name."""
    path_text, sep, label = text.partition("#")
    path_text = path_text.strip()
    if not path_text:
        return Err(ReleaseError(kind="invalid_input", message=f"invalid asset: {text!r}"))

    path = Path(path_text)
    return Ok(ReleaseAsset(path=path, label=label.strip() if sep and label.strip() else path.name))


def release_create_args(
    *, version: str, target: str, assets: Sequence[ReleaseAsset]
) -> list[str]:
    return [
        "release",
        "create",
        version,
        "--generate-notes",
        "--latest",
        "--target",
        target,
        *(a.to_arg() for a in assets),
    ]


def deploy_release(
    *,
    repo_root: Path,
    version: str,
    target: str,
    assets: Sequence[ReleaseAsset],
    test_mode: bool,
    console: ConsoleProtocol,
    create: CreateRelease = create_release,
) -> Result[None, ReleaseError]:
    """Create the GitHub release for ``version`` with the given assets."""
    missing = [a.path for a in assets if not a.path.is_file()]
    if missing:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"release asset not found: {missing[0]}",
            )
        )

    args = release_create_args(version=version, target=target, assets=assets)
    command = shlex.join(["gh", *args])

    if test_mode:
        console.print("Running in test mode, skipping creating GitHub release.")
        console.print(f"Command to create GitHub release: {command}", Style.DIM)
        return Ok(None)

    console.print(f"$ {command}", Style.DIM)
    return create(repo_root=repo_root, args=args)
