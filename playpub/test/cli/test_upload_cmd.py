from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from playpub.cli.context import CLIContext
from playpub.core.config import Config, UploadConfig
from playpub.core.errors import ErrorCode
from playpub.core.result import Err
from playpub.output.console import MockConsole
from playpub.services.publish.model import ApiError, Track

runner = CliRunner()


def _ctx(tmp_path: Path, config: Config | None = None) -> CLIContext:
    return CLIContext(root=tmp_path, config=config or Config(), console=MockConsole())


def _install(
    monkeypatch: pytest.MonkeyPatch, ctx: CLIContext, connect: object
) -> None:
    import playpub.cli.app as app_mod
    import playpub.cli.commands.upload_cmd as upload_cmd

    monkeypatch.setattr(app_mod, "build_context", lambda *args, **kwargs: ctx)
    monkeypatch.setattr(upload_cmd, "connect", connect)


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def _never_connect(service_account: Path) -> object:
    raise AssertionError(f"connect must not be called ({service_account})")


def _upload_args(bundle: Path, service_account: Path, *extra: str) -> list[str]:
    return [
        "--aab-file",
        str(bundle),
        "--package-name",
        "com.example.app",
        "--service-account",
        str(service_account),
        *extra,
    ]


def test_no_arguments_prints_help(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from playpub.cli.app import app

    _install(monkeypatch, _ctx(tmp_path), _never_connect)

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "--aab-file" in result.output


def test_unknown_option_is_usage_error() -> None:
    from playpub.cli.app import app

    result = runner.invoke(app, ["--no-such-flag"])

    assert result.exit_code == int(ErrorCode.USAGE_ERROR)


def test_upload_success(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    fake_publisher,
    connect_with,
) -> None:
    from playpub.cli.app import app

    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, connect_with(fake_publisher))

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file, "--track", "beta"))

    assert result.exit_code == 0
    assert fake_publisher.calls == ["create_edit", "upload_bundle", "update_track", "commit_edit"]
    assert fake_publisher.track_updates == [("edit-123", Track.BETA, 42)]
    console = _console(ctx)
    assert console.find("Upload completed successfully!")
    assert console.find('Version code 42 is now available on the "beta" track')


def test_track_defaults_to_internal(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    fake_publisher,
    connect_with,
) -> None:
    from playpub.cli.app import app

    _install(monkeypatch, _ctx(tmp_path), connect_with(fake_publisher))

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file))

    assert result.exit_code == 0
    assert fake_publisher.track_updates[0][1] == Track.INTERNAL


def test_config_supplies_missing_flags(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    fake_publisher,
    connect_with,
) -> None:
    from playpub.cli.app import app

    config = Config(
        upload=UploadConfig(
            package_name="com.example.app",
            service_account=service_account_file,
            track="production",
        )
    )
    _install(monkeypatch, _ctx(tmp_path, config), connect_with(fake_publisher))

    result = runner.invoke(app, ["--aab-file", str(bundle_file)])

    assert result.exit_code == 0
    assert fake_publisher.track_updates[0][1] == Track.PRODUCTION


def test_invalid_track_fails_before_any_remote_call(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
) -> None:
    from playpub.cli.app import app

    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, _never_connect)

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file, "--track", "staging"))

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert _console(ctx).find(
        'error: Invalid track "staging". Must be one of: internal, alpha, beta, production'
    )


@pytest.mark.parametrize(
    ("flag", "expected"),
    [
        ("--track", 'error: Invalid track "". Must be one of'),
        ("--package-name", "error: --package-name is required"),
    ],
)
def test_empty_flag_does_not_fall_back_to_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    flag: str,
    expected: str,
) -> None:
    from playpub.cli.app import app

    config = Config(
        upload=UploadConfig(package_name="com.example.app", track="production")
    )
    ctx = _ctx(tmp_path, config)
    _install(monkeypatch, ctx, _never_connect)

    result = runner.invoke(
        app,
        [
            "--aab-file",
            str(bundle_file),
            "--service-account",
            str(service_account_file),
            flag,
            "",
        ],
    )

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert _console(ctx).find(expected)


def test_missing_bundle_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, service_account_file: Path
) -> None:
    from playpub.cli.app import app

    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, _never_connect)

    result = runner.invoke(app, _upload_args(tmp_path / "missing.aab", service_account_file))

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert _console(ctx).has_error()


def test_upload_failure_rolls_back(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    fake_publisher,
    connect_with,
) -> None:
    from playpub.cli.app import app

    fake_publisher.fail["upload_bundle"] = ApiError("APK specifies a version code already used", 400)
    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, connect_with(fake_publisher))

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file))

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert fake_publisher.calls == ["create_edit", "upload_bundle", "delete_edit"]
    assert _console(ctx).find("error: Upload failed: upload bundle failed: 400")


def test_commit_failure_warns_edit_may_be_live(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
    fake_publisher,
    connect_with,
) -> None:
    from playpub.cli.app import app

    fake_publisher.fail["commit_edit"] = ApiError("backend error", 500)
    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, connect_with(fake_publisher))

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file))

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert fake_publisher.calls[-2:] == ["commit_edit", "delete_edit"]
    assert _console(ctx).find("the commit of edit edit-123 failed; it may have been applied anyway")


def test_authentication_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    bundle_file: Path,
    service_account_file: Path,
) -> None:
    from playpub.cli.app import app

    def failing_connect(service_account: Path):
        del service_account
        return Err(ApiError("invalid service account file: missing client_email"))

    ctx = _ctx(tmp_path)
    _install(monkeypatch, ctx, failing_connect)

    result = runner.invoke(app, _upload_args(bundle_file, service_account_file))

    assert result.exit_code == int(ErrorCode.FAILURE)
    assert _console(ctx).find("authentication failed: invalid service account file")


def test_version_flag() -> None:
    from playpub import __version__
    from playpub.cli.app import app

    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
