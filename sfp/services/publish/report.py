from __future__ import annotations

from dataclasses import dataclass, field

from sfp.output.console import ConsoleProtocol, Style
from sfp.release.errors import PublishError
from sfp.services.publish.metrics import PublishMetrics
from sfp.services.publish.model import PublishOutcome


def _outcomes() -> list[PublishOutcome]:
    return []


def _labels() -> list[str]:
    return []


@dataclass
class RunSummary:
    """Accumulated state of one publish run.

    Owned by the orchestrator and only mutated from its loop.
    """

    outcomes: list[PublishOutcome] = field(default_factory=_outcomes)
    failed_artifacts: list[str] = field(default_factory=_labels)
    created_tags: tuple[str, ...] = ()
    fatal: PublishError | None = None
    elapsed_seconds: float = 0.0

    @property
    def published_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_published)

    @property
    def failed_count(self) -> int:
        return len(self.failed_artifacts)

    def add(self, outcome: PublishOutcome, *, label: str) -> None:
        self.outcomes.append(outcome)
        if not outcome.is_published:
            self.failed_artifacts.append(label)


def format_elapsed(seconds: float) -> str:
    """Format a duration as HH:MM:SS (whole seconds, wraps after 24h)."""
    total = int(max(seconds, 0.0)) % (24 * 3600)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def print_summary(summary: RunSummary, console: ConsoleProtocol) -> None:
    console.rule()
    console.print(
        f"{summary.published_count} artifacts published in "
        f"{format_elapsed(summary.elapsed_seconds)} with {{{summary.failed_count}}} errors"
    )
    if summary.failed_artifacts:
        console.print("Packages Failed to Publish", Style.ERROR)
        for label in summary.failed_artifacts:
            console.print(f"  - {label}", Style.ERROR)
    console.rule()


def emit_metrics(
    summary: RunSummary,
    metrics: PublishMetrics,
    console: ConsoleProtocol,
    *,
    pushgateway: str | None = None,
    job: str = "sfpowerscripts",
) -> None:
    """Record run gauges and push them if a gateway is configured.

    A failed push is reported as a warning only.
    """
    metrics.record(
        duration_ms=summary.elapsed_seconds * 1000.0,
        succeeded=summary.published_count,
        failed=summary.failed_count,
    )
    if pushgateway is None:
        return
    try:
        metrics.push(pushgateway, job=job)
    except OSError as e:
        console.warning(f"metrics push to {pushgateway} failed: {e}")
