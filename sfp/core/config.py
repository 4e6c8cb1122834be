"""Typed configuration loading.

Settings for the publish command may live in an optional `sfp.toml` file.
Command-line flags always take precedence over values read here.

Example:
    [publish]
    artifact_dir = "artifacts"
    script_path = "scripts/publish.sh"

    [git]
    create_tags = true

    [metrics]
    pushgateway = "localhost:9091"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_flag, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "GitConfig",
    "MetricsConfig",
    "PublishConfig",
    "PUSHGATEWAY_ENV",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "sfp.toml"
PUSHGATEWAY_ENV = "SFP_PUSHGATEWAY"

DEFAULT_ARTIFACT_DIR = "artifacts"
DEFAULT_GIT_USER_NAME = "sfpowerscripts"
DEFAULT_GIT_USER_EMAIL = "sfpowerscripts@dxscale"
DEFAULT_METRICS_JOB = "sfpowerscripts"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Defaults for the publish command flags."""

    artifact_dir: str = DEFAULT_ARTIFACT_DIR
    script_path: str | None = None
    devhub_alias: str | None = None
    promoted_only: bool = False
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Tagging behaviour and the identity tags are authored with."""

    create_tags: bool = False
    push_tags: bool = False
    user_name: str = DEFAULT_GIT_USER_NAME
    user_email: str = DEFAULT_GIT_USER_EMAIL


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    """Where run gauges are pushed. No gateway means metrics stay local."""

    pushgateway: str | None = None
    job: str = DEFAULT_METRICS_JOB


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    publish: PublishConfig = field(default_factory=PublishConfig)
    git: GitConfig = field(default_factory=GitConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        publish: StrDict = get_table(data, "publish")
        git: StrDict = get_table(data, "git")
        metrics: StrDict = get_table(data, "metrics")

        return cls(
            publish=PublishConfig(
                artifact_dir=get_str(publish, "artifact_dir") or DEFAULT_ARTIFACT_DIR,
                script_path=get_str(publish, "script_path"),
                devhub_alias=get_str(publish, "devhub_alias"),
                promoted_only=get_flag(publish, "promoted_only"),
                tag=get_str(publish, "tag"),
            ),
            git=GitConfig(
                create_tags=get_flag(git, "create_tags"),
                push_tags=get_flag(git, "push_tags"),
                user_name=get_str(git, "user_name") or DEFAULT_GIT_USER_NAME,
                user_email=get_str(git, "user_email") or DEFAULT_GIT_USER_EMAIL,
            ),
            metrics=MetricsConfig(
                pushgateway=_env_override(PUSHGATEWAY_ENV) or get_str(metrics, "pushgateway"),
                job=get_str(metrics, "job") or DEFAULT_METRICS_JOB,
            ),
        )


def _env_override(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
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
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config.from_dict({}))
    return load_config(path)
