"""Publish script execution.

The user script is run once per eligible artifact:

    <script> <package name> <dash version> <artifact path> <true|false>

through `bash -e` on POSIX hosts and `cmd.exe /c` on Windows. The script's
stdout is discarded, its stderr goes to the terminal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sfp.core.result import Err, Ok, Result
from sfp.platform.detection import Platform, detect_platform
from sfp.platform.process import run_quiet
from sfp.release.errors import PublishError
from sfp.services.publish.model import PublishRequest

__all__ = [
    "Publisher",
    "ScriptPublisher",
    "ensure_script_exists",
]


class Publisher(Protocol):
    """Publishes a single artifact."""

    def publish(self, request: PublishRequest) -> Result[None, PublishError]: ...


def ensure_script_exists(script_path: Path) -> Result[None, PublishError]:
    if not script_path.exists():
        return Err(
            PublishError(
                kind="script_missing",
                message=f"Script path {script_path} does not exist",
                hint="Pass --script-path or set publish.script_path in sfp.toml",
            )
        )
    return Ok(None)


class ScriptPublisher:
    """Publisher backed by the user-supplied publish script."""

    def __init__(
        self,
        *,
        script_path: Path,
        cwd: Path,
        platform: Platform | None = None,
    ) -> None:
        self._script_path = script_path
        self._cwd = cwd
        self._platform = platform if platform is not None else detect_platform()

    def command(self, request: PublishRequest) -> list[str]:
        return [*self._platform.script_launcher, str(self._script_path), *request.script_args()]

    def publish(self, request: PublishRequest) -> Result[None, PublishError]:
        result = run_quiet(self.command(request), cwd=self._cwd)
        if isinstance(result, Err):
            error = result.error
            detail = error.stderr.strip()
            message = f"Publish script failed for {request.package_name} (exit {error.returncode})"
            if detail:
                message = f"{message}: {detail}"
            return Err(PublishError(kind="publish_failed", message=message))
        return Ok(None)
