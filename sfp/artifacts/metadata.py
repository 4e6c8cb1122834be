"""Artifact metadata loading and resolution.

The metadata file written at build time is the source of truth for a
package's type and registry version id. A filename-derived candidate is
matched against every known metadata file by content:

    package_name           == candidate.package_name
    package_version_number == candidate.version (dotted)
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from sfp.core.result import Err, Ok, Result
from sfp.core.structured import as_str_dict, get_str
from sfp.release.errors import PublishError

from .locator import ArtifactFilePaths
from .naming import CandidateIdentity

__all__ = [
    "PackageMetadata",
    "load_package_metadata",
    "resolve_package_metadata",
]

UNLOCKED = "unlocked"


@dataclass(frozen=True, slots=True)
class PackageMetadata:
    """Authoritative package identity from artifact_metadata.json.

    Attributes:
        package_name: Package name
        package_version_number: Dotted version (e.g. 1.2.0.4)
        package_type: unlocked, managed, source, ...
        package_version_id: Subscriber package version id (04t...), if any
    """

    package_name: str
    package_version_number: str
    package_type: str
    package_version_id: str | None = None

    @property
    def is_unlocked(self) -> bool:
        return self.package_type.lower() == UNLOCKED

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PackageMetadata | None:
        name = get_str(data, "package_name")
        version = get_str(data, "package_version_number")
        if name is None or version is None:
            return None
        return cls(
            package_name=name,
            package_version_number=version,
            package_type=get_str(data, "package_type") or "",
            package_version_id=get_str(data, "package_version_id"),
        )


def load_package_metadata(path: Path) -> Result[PackageMetadata, PublishError]:
    """Read one metadata file."""
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(
            PublishError(kind="metadata_invalid", message=f"Unable to read {path}: {e}")
        )

    data = as_str_dict(data_obj)
    metadata = PackageMetadata.from_dict(data) if data is not None else None
    if metadata is None:
        return Err(
            PublishError(
                kind="metadata_invalid",
                message=f"{path} is not valid artifact metadata",
                hint="Expected a JSON object with package_name and package_version_number",
            )
        )
    return Ok(metadata)


def resolve_package_metadata(
    file_paths: Sequence[ArtifactFilePaths],
    candidate: CandidateIdentity,
) -> Result[PackageMetadata, PublishError]:
    """Find the metadata record for a filename-derived candidate.

    Scans file_paths in order. Identical duplicates (the same artifact
    present both zipped and unpacked) resolve to the first one; matches that
    disagree on type or version id are rejected as ambiguous.
    """
    version = candidate.version
    matches: list[tuple[Path, PackageMetadata]] = []
    load_errors: list[PublishError] = []

    for paths in file_paths:
        result = load_package_metadata(paths.metadata_path)
        if isinstance(result, Err):
            load_errors.append(result.error)
            continue
        record = result.value
        if (
            record.package_name == candidate.package_name
            and record.package_version_number == version
        ):
            matches.append((paths.metadata_path, record))

    if not matches:
        if load_errors:
            return Err(load_errors[0])
        return Err(
            PublishError(
                kind="metadata_not_found",
                message=(
                    f"Unable to find artifact metadata for {candidate.package_name} "
                    f"Version {version}"
                ),
            )
        )

    first_path, first = matches[0]
    conflicting = [path for path, record in matches[1:] if record != first]
    if conflicting:
        files = ", ".join(str(p) for p in (first_path, *conflicting))
        return Err(
            PublishError(
                kind="metadata_ambiguous",
                message=(
                    f"Conflicting artifact metadata for {candidate.package_name} "
                    f"Version {version}"
                ),
                hint=f"Remove stale artifacts: {files}",
            )
        )
    return Ok(first)
