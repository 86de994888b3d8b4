from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from playpub.core.config import CONFIG_FILENAME, Config, load_config, load_config_or_default
from playpub.core.errors import ErrorCode
from playpub.core.result import Err
from playpub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def build_context(
    config_path: Path | None = None, *, progress_to_stderr: bool = False
) -> CLIContext:
    """Load config and set up the console.

    An explicit ``--config`` must exist; the default ``playpub.toml`` in the
    current directory is optional.
    """
    root = Path.cwd()
    if config_path is not None:
        config_result = load_config(config_path.expanduser())
    else:
        config_result = load_config_or_default(root / CONFIG_FILENAME)

    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        root=root,
        config=config_result.value,
        console=RichConsole(progress_to_stderr=progress_to_stderr),
    )
