from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from sfp.core.result import Err, Ok, Result
from sfp.git.repository import GitError, GitIdentity
from sfp.output.console import ConsoleProtocol, Style
from sfp.release.errors import PublishError
from sfp.services.publish.model import PublishOutcome


class TagRepository(Protocol):
    def create_annotated_tag(
        self,
        name: str,
        message: str,
        identity: GitIdentity,
        *,
        ref: str = "HEAD",
    ) -> Result[None, GitError]: ...

    def push_tags(self, remote: str | None = None) -> Result[str, GitError]: ...


def should_record_tags(*, create_tags: bool, failed_artifacts: Sequence[str]) -> bool:
    """Tags are all-or-nothing: a single failed artifact disables tagging."""
    return create_tags and not failed_artifacts


def record_tags(
    *,
    repo: TagRepository,
    outcomes: Sequence[PublishOutcome],
    identity: GitIdentity,
    push: bool,
    console: ConsoleProtocol,
) -> Result[tuple[str, ...], PublishError]:
    """Tag HEAD once per published artifact, then optionally push all tags."""
    published = [o for o in outcomes if o.is_published]

    console.print("Creating Git Tags in Repo", Style.INFO)
    created: list[str] = []
    for outcome in published:
        result = repo.create_annotated_tag(outcome.tag, outcome.tag_message(), identity)
        if isinstance(result, Err):
            return Err(
                PublishError(
                    kind="git_tag_failed",
                    message=f"Failed to create tag {outcome.tag}",
                    hint=result.error.message,
                )
            )
        created.append(outcome.tag)
        console.print(f"tag: {outcome.tag}", Style.DIM)

    if push:
        console.print("Pushing Git Tags to Repo", Style.INFO)
        pushed = repo.push_tags()
        if isinstance(pushed, Err):
            return Err(
                PublishError(
                    kind="git_push_failed",
                    message="Failed to push tags",
                    hint=pushed.error.message,
                )
            )

    return Ok(tuple(created))
