from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from sfp.core.config import CONFIG_FILENAME, Config, load_config, load_config_or_default
from sfp.core.errors import ErrorCode
from sfp.core.result import Err
from sfp.output.console import ConsoleProtocol, RichConsole
from sfp.platform.detection import Platform, detect_platform


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    platform: Platform
    config: Config
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Build the command context.

    An explicit --config must exist; the default sfp.toml is optional.
    """
    cwd = Path.cwd()
    if config_path is not None:
        config_result = load_config(config_path)
    else:
        config_result = load_config_or_default(cwd / CONFIG_FILENAME)

    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        cwd=cwd,
        platform=detect_platform(),
        config=config_result.value,
        console=RichConsole(),
    )
