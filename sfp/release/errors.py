"""Error types for the publish run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from sfp.core.errors import ErrorCode

PublishErrorKind = Literal[
    # run-level: abort before or after the artifact loop
    "script_missing",
    "artifact_dir_missing",
    "released_query_failed",
    "git_tag_failed",
    "git_push_failed",
    # per-artifact: recorded, the loop continues
    "metadata_not_found",
    "metadata_invalid",
    "metadata_ambiguous",
    "not_promoted",
    "publish_failed",
]

_EXIT_CODES: dict[str, ErrorCode] = {
    "script_missing": ErrorCode.USER_ERROR,
    "artifact_dir_missing": ErrorCode.IO_ERROR,
    "released_query_failed": ErrorCode.NETWORK_ERROR,
    "git_tag_failed": ErrorCode.GIT_ERROR,
    "git_push_failed": ErrorCode.GIT_ERROR,
}


@dataclass(frozen=True, slots=True)
class PublishError:
    """Canonical publish error payload."""

    kind: PublishErrorKind
    message: str
    hint: str | None = None

    @property
    def exit_code(self) -> ErrorCode:
        return _EXIT_CODES.get(self.kind, ErrorCode.PUBLISH_ERROR)

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
