from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from sfp.artifacts.metadata import PackageMetadata
from sfp.core.result import Err, Ok, Result
from sfp.core.structured import as_obj_list, as_str_dict, get_str
from sfp.platform.process import ProcessError
from sfp.platform.process import run as run_process
from sfp.release.errors import PublishError

SFDX_TIMEOUT_SECONDS = 5 * 60.0
SFDX_READ_RETRY_ATTEMPTS = 3
SFDX_READ_RETRY_DELAY_SECONDS = 2.0

VERSION_ID_FIELD = "SubscriberPackageVersionId"


@dataclass(frozen=True, slots=True)
class ReleasedVersions:
    """Subscriber package version ids that have been promoted in the Dev Hub."""

    version_ids: frozenset[str]

    def contains(self, version_id: str | None) -> bool:
        return version_id is not None and version_id in self.version_ids

    def __len__(self) -> int:
        return len(self.version_ids)


def _is_transient_sfdx_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "etimedout",
        "econnreset",
        "econnrefused",
        "socket hang up",
        "service unavailable",
        "server_unavailable",
        "request_limit_exceeded",
    )
    return any(marker in text for marker in markers)


def parse_released_versions(payload: str) -> Result[ReleasedVersions, PublishError]:
    """Parse `sfdx force:package:version:list --json` output."""
    try:
        data_obj: object = json.loads(payload)
    except json.JSONDecodeError as e:
        return Err(
            PublishError(
                kind="released_query_failed",
                message=f"Invalid JSON from package version list: {e}",
            )
        )

    data = as_str_dict(data_obj)
    rows = as_obj_list(data.get("result")) if data is not None else None
    if rows is None:
        return Err(
            PublishError(
                kind="released_query_failed",
                message="Package version list has no result array",
            )
        )

    ids: set[str] = set()
    for row in rows:
        item = as_str_dict(row)
        if item is None:
            continue
        version_id = get_str(item, VERSION_ID_FIELD)
        if version_id is not None:
            ids.add(version_id)
    return Ok(ReleasedVersions(version_ids=frozenset(ids)))


def fetch_released_versions(
    *,
    workspace_root: Path,
    devhub_alias: str,
    retry_attempts: int = SFDX_READ_RETRY_ATTEMPTS,
) -> Result[ReleasedVersions, PublishError]:
    """Query the Dev Hub for released (promoted) package versions."""
    cmd = ["sfdx", "force:package:version:list", "--released", "-v", devhub_alias, "--json"]
    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=workspace_root, timeout=SFDX_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return parse_released_versions(result.value)

        error = result.error
        if attempt < attempts - 1 and _is_transient_sfdx_error(error):
            sleep(SFDX_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        return Err(
            PublishError(
                kind="released_query_failed",
                message=f"Unable to list released package versions for {devhub_alias}",
                hint=error.stderr.strip() or str(error),
            )
        )

    return Err(
        PublishError(
            kind="released_query_failed",
            message=f"Unable to list released package versions for {devhub_alias}",
        )
    )


def check_promotion(
    metadata: PackageMetadata,
    *,
    raw_version: str,
    released: ReleasedVersions | None,
    promoted_only: bool,
) -> Result[None, PublishError]:
    """Decide whether an artifact may be published.

    Only unlocked packages are subject to the promotion check; managed and
    other package types are always eligible.
    """
    if not promoted_only or not metadata.is_unlocked:
        return Ok(None)

    if released is not None and released.contains(metadata.package_version_id):
        return Ok(None)

    return Err(
        PublishError(
            kind="not_promoted",
            message=(
                f"Skipping {metadata.package_name} Version {raw_version}. "
                f"Package Version Id {metadata.package_version_id} has not been promoted."
            ),
        )
    )
