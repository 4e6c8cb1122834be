"""Git repository abstraction for release tagging.

All operations return Result types. Author identity for tags is passed per
command with `git -c`, so the user's global git config is never touched.

Usage:
    repo = Repository(Path("."))
    identity = GitIdentity(name="sfpowerscripts", email="sfpowerscripts@dxscale")

    match repo.create_annotated_tag("core_v1.0.0", "core unlocked Package 1.0.0", identity):
        case Ok(_):
            print("tagged")
        case Err(e):
            print(f"Tag failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sfp.core.result import Err, Ok, Result
from sfp.platform.process import ProcessError
from sfp.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "GitIdentity",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitIdentity:
    """Author identity used for tags created by automation."""

    name: str
    email: str

    def config_args(self) -> list[str]:
        return ["-c", f"user.name={self.name}", "-c", f"user.email={self.email}"]


class Repository:
    """Git repository the published artifacts were built from.

    Attributes:
        path: Path to the working tree (any directory inside it works)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def head_sha(self) -> Result[str, GitError]:
        """Resolve the current HEAD revision."""
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse HEAD", e, "cannot resolve HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def create_annotated_tag(
        self,
        name: str,
        message: str,
        identity: GitIdentity,
        *,
        ref: str = "HEAD",
    ) -> Result[None, GitError]:
        """Create an annotated tag at ref.

        Fails if the tag already exists.
        """
        result = self._run(["tag", "-a", "-m", message, name, ref], identity=identity)
        match result:
            case Err(e):
                return Err(_git_error(f"tag {name}", e, f"failed to create tag {name}"))
            case Ok(_):
                return Ok(None)

    def push_tags(self, remote: str | None = None) -> Result[str, GitError]:
        """Push all local tags in a single operation."""
        args = ["push", remote, "--tags"] if remote else ["push", "--tags"]
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error("push --tags", e, "failed to push tags"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(
        self, args: list[str], *, identity: GitIdentity | None = None
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        prefix = identity.config_args() if identity is not None else []
        return run_process(
            ["git", *prefix, "-C", str(self.path), *args], cwd=self.path, timeout=timeout
        )


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )
