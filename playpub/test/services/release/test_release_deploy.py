from __future__ import annotations

from pathlib import Path

from playpub.core.result import Err, Ok
from playpub.output.console import MockConsole
from playpub.services.release.deploy import (
    ReleaseAsset,
    deploy_release,
    parse_asset,
    release_create_args,
)


def test_parse_asset_label_defaults_to_file_name() -> None:
    assert parse_asset("dist/playpub.whl") == Ok(
        ReleaseAsset(path=Path("dist/playpub.whl"), label="playpub.whl")
    )
    assert parse_asset("dist/a.tar.gz#source") == Ok(
        ReleaseAsset(path=Path("dist/a.tar.gz"), label="source")
    )
    assert isinstance(parse_asset("#label"), Err)


def test_release_create_args() -> None:
    args = release_create_args(
        version="1.3.0",
        target="main",
        assets=[ReleaseAsset(path=Path("dist/x.whl"), label="wheel")],
    )
    assert args == [
        "release",
        "create",
        "1.3.0",
        "--generate-notes",
        "--latest",
        "--target",
        "main",
        "dist/x.whl#wheel",
    ]


def test_test_mode_only_prints_the_command(tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def create(*, repo_root: Path, args: list[str]):
        del repo_root
        calls.append(args)
        return Ok(None)

    console = MockConsole()
    result = deploy_release(
        repo_root=tmp_path,
        version="1.3.0",
        target="main",
        assets=[],
        test_mode=True,
        console=console,
        create=create,
    )

    assert result == Ok(None)
    assert calls == []
    assert console.find("gh release create 1.3.0 --generate-notes --latest --target main")


def test_creates_release_with_assets(tmp_path: Path) -> None:
    wheel = tmp_path / "playpub.whl"
    wheel.write_bytes(b"wheel")
    calls: list[list[str]] = []

    def create(*, repo_root: Path, args: list[str]):
        del repo_root
        calls.append(args)
        return Ok(None)

    result = deploy_release(
        repo_root=tmp_path,
        version="2.0.0",
        target="release",
        assets=[ReleaseAsset(path=wheel, label="wheel")],
        test_mode=False,
        console=MockConsole(),
        create=create,
    )

    assert result == Ok(None)
    assert calls == [release_create_args(
        version="2.0.0", target="release", assets=[ReleaseAsset(path=wheel, label="wheel")]
    )]


def test_missing_asset_fails_before_gh(tmp_path: Path) -> None:
    def create(**_: object):
        raise AssertionError("gh must not run")

    result = deploy_release(
        repo_root=tmp_path,
        version="2.0.0",
        target="main",
        assets=[ReleaseAsset(path=tmp_path / "missing.whl", label="wheel")],
        test_mode=False,
        console=MockConsole(),
        create=create,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
