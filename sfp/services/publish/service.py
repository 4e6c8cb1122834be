"""Publish orchestration.

One run goes through:

1. fatal preconditions: publish script exists, released versions fetched
   (promoted-only mode), artifact directory exists;
2. the artifact loop, one artifact at a time: filename -> metadata ->
   promotion check -> publish script. Failures are recorded per artifact
   and never stop the loop;
3. tagging, only when requested and nothing failed;
4. the summary and metrics, always, from a finally block.
"""

from __future__ import annotations

import tempfile
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from sfp.artifacts.locator import ArtifactFilePaths, fetch_artifact_file_paths, find_artifacts
from sfp.artifacts.metadata import resolve_package_metadata
from sfp.artifacts.naming import CandidateIdentity, parse_artifact_filename
from sfp.core.errors import ErrorCode
from sfp.core.result import Err, Ok, Result
from sfp.output.console import ConsoleProtocol, Style
from sfp.release.errors import PublishError
from sfp.services.publish.executor import Publisher, ensure_script_exists
from sfp.services.publish.metrics import PublishMetrics
from sfp.services.publish.model import (
    PublishOptions,
    PublishOutcome,
    PublishRequest,
    PublishStatus,
)
from sfp.services.publish.promotion import ReleasedVersions, check_promotion
from sfp.services.publish.report import RunSummary, emit_metrics, print_summary
from sfp.services.publish.tagging import TagRepository, record_tags, should_record_tags

ReleasedQuery = Callable[[str], Result[ReleasedVersions, PublishError]]


@dataclass(frozen=True, slots=True)
class PublishReport:
    summary: RunSummary
    exit_code: ErrorCode


class PublishService:
    def __init__(
        self,
        *,
        options: PublishOptions,
        console: ConsoleProtocol,
        publisher: Publisher,
        repo: TagRepository,
        released_query: ReleasedQuery,
        metrics: PublishMetrics | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._options = options
        self._console = console
        self._publisher = publisher
        self._repo = repo
        self._released_query = released_query
        self._metrics = metrics or PublishMetrics(
            promoted_only=options.promoted_only, run_tag=options.run_tag
        )
        self._clock = clock

    @property
    def metrics(self) -> PublishMetrics:
        return self._metrics

    def run(self) -> PublishReport:
        summary = RunSummary()
        started = self._clock()
        try:
            self._print_header()
            with tempfile.TemporaryDirectory(prefix="sfp-artifacts-") as scratch:
                fatal = self._execute(summary, scratch_dir=Path(scratch))
            if fatal is not None:
                summary.fatal = fatal
                self._console.error(fatal.pretty())
        finally:
            summary.elapsed_seconds = self._clock() - started
            print_summary(summary, self._console)
            emit_metrics(
                summary,
                self._metrics,
                self._console,
                pushgateway=self._options.pushgateway,
                job=self._options.metrics_job,
            )

        return PublishReport(summary=summary, exit_code=_exit_code(summary))

    def _print_header(self) -> None:
        self._console.header("sfpowerscripts orchestrator")
        self._console.print("command: publish")
        self._console.print(
            f"Publish promoted artifacts only: {_flag(self._options.promoted_only)}", Style.DIM
        )

    def _execute(self, summary: RunSummary, *, scratch_dir: Path) -> PublishError | None:
        options = self._options

        ok = ensure_script_exists(options.script_path)
        if isinstance(ok, Err):
            return ok.error

        released: ReleasedVersions | None = None
        if options.promoted_only:
            if not options.devhub_alias:
                return PublishError(
                    kind="released_query_failed",
                    message="Publishing promoted artifacts only requires a Dev Hub alias",
                    hint="Pass --devhub-alias",
                )
            fetched = self._released_query(options.devhub_alias)
            if isinstance(fetched, Err):
                return fetched.error
            released = fetched.value

        artifacts = find_artifacts(options.artifact_dir)
        if isinstance(artifacts, Err):
            return artifacts.error
        file_paths = fetch_artifact_file_paths(options.artifact_dir, scratch_dir)
        if isinstance(file_paths, Err):
            return file_paths.error

        for artifact in artifacts.value:
            candidate = parse_artifact_filename(artifact)
            if candidate is None:
                continue
            outcome = self._process(artifact, candidate, file_paths.value, released)
            summary.add(outcome, label=candidate.label)

        if should_record_tags(
            create_tags=options.create_tags, failed_artifacts=summary.failed_artifacts
        ):
            tagged = record_tags(
                repo=self._repo,
                outcomes=summary.outcomes,
                identity=options.git_identity,
                push=options.push_tags,
                console=self._console,
            )
            if isinstance(tagged, Err):
                return tagged.error
            summary.created_tags = tagged.value

        return None

    def _process(
        self,
        artifact: Path,
        candidate: CandidateIdentity,
        file_paths: Sequence[ArtifactFilePaths],
        released: ReleasedVersions | None,
    ) -> PublishOutcome:
        metadata = resolve_package_metadata(file_paths, candidate)
        if isinstance(metadata, Err):
            self._console.error(metadata.error.pretty())
            return self._outcome(artifact, candidate, "", "failed", metadata.error)
        package_type = metadata.value.package_type

        eligible = check_promotion(
            metadata.value,
            raw_version=candidate.raw_version,
            released=released,
            promoted_only=self._options.promoted_only,
        )
        if isinstance(eligible, Err):
            self._console.warning(eligible.error.message)
            return self._outcome(
                artifact, candidate, package_type, "skipped-not-promoted", eligible.error
            )

        self._console.print(
            f"Publishing {candidate.package_name} Version {candidate.raw_version}..."
        )
        request = PublishRequest(
            package_name=candidate.package_name,
            raw_version=candidate.raw_version,
            artifact=artifact,
            promoted_only=self._options.promoted_only,
        )
        match self._publisher.publish(request):
            case Err(error):
                self._console.error(error.message)
                return self._outcome(artifact, candidate, package_type, "failed", error)
            case Ok(_):
                self._console.success(f"{candidate.package_name} {candidate.version}")
                return self._outcome(artifact, candidate, package_type, "published", None)

    def _outcome(
        self,
        artifact: Path,
        candidate: CandidateIdentity,
        package_type: str,
        status: PublishStatus,
        error: PublishError | None,
    ) -> PublishOutcome:
        return PublishOutcome(
            package_name=candidate.package_name,
            version=candidate.version,
            package_type=package_type,
            tag=candidate.tag,
            artifact=artifact,
            status=status,
            reason=error.message if error is not None else None,
        )


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _exit_code(summary: RunSummary) -> ErrorCode:
    if summary.fatal is not None:
        return summary.fatal.exit_code
    if summary.failed_artifacts:
        return ErrorCode.PUBLISH_ERROR
    return ErrorCode.OK
