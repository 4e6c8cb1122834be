"""Child processes for sfdx, git and the user publish script.

Output handling differs by caller:

- run() captures both streams; sfdx and git output is parsed or shown in
  error hints.
- run_quiet() drops stdout and leaves stderr attached to the terminal, so an
  operator sees why a publish script failed without the script's chatter.

Neither raises for a non-zero exit, a missing executable or a timeout; all
of those come back as Err(ProcessError).
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from sfp.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_quiet"]

NOT_STARTED = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero or could not be run.

    `returncode` is NOT_STARTED (-1) when the executable was missing or the
    command timed out. `stderr` is empty for run_quiet() failures since the
    stream went straight to the terminal.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        suffix = " ..." if len(self.command) > 3 else ""
        return f"{shown}{suffix} failed (exit {self.returncode})"


def _not_started(cmd: list[str], reason: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), NOT_STARTED, stdout, reason))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run cmd in cwd and return its stdout."""
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _not_started(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _not_started(cmd, str(e))

    if proc.returncode == 0:
        return Ok(proc.stdout)
    return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))


def run_quiet(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run cmd to completion with stdout discarded. No timeout."""
    try:
        returncode = subprocess.call(
            cmd,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
        )
    except OSError as e:
        return _not_started(cmd, str(e))

    if returncode == 0:
        return Ok(None)
    return Err(ProcessError(tuple(cmd), returncode, "", ""))
