from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from sfp.git.repository import GitIdentity

PublishStatus = Literal["published", "skipped-not-promoted", "failed"]


def _default_identity() -> GitIdentity:
    return GitIdentity(name="sfpowerscripts", email="sfpowerscripts@dxscale")


@dataclass(frozen=True, slots=True)
class PublishOptions:
    """Resolved settings for one publish run (flags merged over config)."""

    artifact_dir: Path
    script_path: Path
    promoted_only: bool = False
    devhub_alias: str | None = None
    run_tag: str | None = None
    create_tags: bool = False
    push_tags: bool = False
    git_identity: GitIdentity = field(default_factory=_default_identity)
    pushgateway: str | None = None
    metrics_job: str = "sfpowerscripts"


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Arguments handed to the publish script for one artifact."""

    package_name: str
    raw_version: str  # dash form, as in the filename
    artifact: Path
    promoted_only: bool

    def script_args(self) -> list[str]:
        return [
            self.package_name,
            self.raw_version,
            str(self.artifact),
            "true" if self.promoted_only else "false",
        ]


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    package_name: str
    version: str  # dotted
    package_type: str
    tag: str
    artifact: Path
    status: PublishStatus
    reason: str | None = None

    @property
    def is_published(self) -> bool:
        return self.status == "published"

    def tag_message(self) -> str:
        return f"{self.package_name} {self.package_type} Package {self.version}"
