"""Typed configuration loading.

The config file is optional. It supplies defaults for upload flags and the
release target branch; command-line flags always win.

    [upload]
    package_name = "com.example.app"
    service_account = "service-account.json"
    track = "internal"

    [release]
    target = "main"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ReleaseConfig",
    "UploadConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "playpub.toml"
DEFAULT_RELEASE_TARGET = "main"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Defaults for the upload and auth-check flags.

    ``track`` is kept as the raw string: it is validated together with the
    command-line value so both report the same error.
    """

    package_name: str | None = None
    service_account: Path | None = None
    track: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    target: str = DEFAULT_RELEASE_TARGET


@dataclass(frozen=True, slots=True)
class Config:
    upload: UploadConfig = field(default_factory=UploadConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path | None = None) -> Config:
        """Create Config from parsed TOML.

        Relative ``service_account`` paths resolve against ``base_dir``
        (the directory holding the config file).
        """
        upload: StrDict = get_table(data, "upload") or {}
        release: StrDict = get_table(data, "release") or {}

        service_account: Path | None = None
        raw_sa = get_str(upload, "service_account")
        if raw_sa is not None:
            service_account = Path(raw_sa).expanduser()
            if base_dir is not None and not service_account.is_absolute():
                service_account = base_dir / service_account

        return cls(
            upload=UploadConfig(
                package_name=get_str(upload, "package_name"),
                service_account=service_account,
                track=get_str(upload, "track"),
            ),
            release=ReleaseConfig(
                target=get_str(release, "target") or DEFAULT_RELEASE_TARGET,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value, base_dir=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, else return defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
