"""Artifact discovery.

An artifact directory holds build outputs either as zip archives or as
already unpacked directories. Both carry an `artifact_metadata.json`. Two
independent views are produced:

- find_artifacts(): every entry whose name carries the artifact marker,
  which is what the publish loop iterates over;
- fetch_artifact_file_paths(): where the metadata for each artifact-bearing
  unit lives, which the metadata resolver scans by content.

Archives are opened read-only; their metadata member is extracted into a
caller-owned scratch directory.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sfp.core.result import Err, Ok, Result
from sfp.release.errors import PublishError

from .naming import ARTIFACT_MARKER

__all__ = [
    "METADATA_FILENAME",
    "ArtifactFilePaths",
    "fetch_artifact_file_paths",
    "find_artifacts",
]

METADATA_FILENAME = "artifact_metadata.json"


@dataclass(frozen=True, slots=True)
class ArtifactFilePaths:
    """Location of one artifact and its metadata file.

    Attributes:
        source: Artifact archive or unpacked artifact directory
        metadata_path: Path to the artifact_metadata.json describing it
    """

    source: Path
    metadata_path: Path


def _ensure_dir(artifact_dir: Path) -> Result[None, PublishError]:
    if not artifact_dir.is_dir():
        return Err(
            PublishError(
                kind="artifact_dir_missing",
                message=f"Artifact directory {artifact_dir} does not exist",
                hint="Pass --artifact-dir or set publish.artifact_dir in sfp.toml",
            )
        )
    return Ok(None)


def find_artifacts(artifact_dir: Path) -> Result[list[Path], PublishError]:
    """List artifact archives and directories under artifact_dir (recursive)."""
    ok = _ensure_dir(artifact_dir)
    if isinstance(ok, Err):
        return ok
    return Ok(sorted(artifact_dir.rglob(f"*{ARTIFACT_MARKER}*")))


def fetch_artifact_file_paths(
    artifact_dir: Path, scratch_dir: Path
) -> Result[list[ArtifactFilePaths], PublishError]:
    """Map each artifact unit under artifact_dir to its metadata file.

    Zip archives without a metadata member, or that are not valid zips,
    contribute nothing.
    """
    ok = _ensure_dir(artifact_dir)
    if isinstance(ok, Err):
        return ok

    out: list[ArtifactFilePaths] = []
    for index, entry in enumerate(sorted(artifact_dir.rglob(f"*{ARTIFACT_MARKER}*"))):
        if entry.is_dir():
            metadata = entry / METADATA_FILENAME
            if metadata.is_file():
                out.append(ArtifactFilePaths(source=entry, metadata_path=metadata))
        elif entry.suffix == ".zip":
            extracted = _extract_metadata(entry, scratch_dir / f"{index:04d}-{entry.stem}")
            if extracted is not None:
                out.append(ArtifactFilePaths(source=entry, metadata_path=extracted))
    return Ok(out)


def _extract_metadata(archive: Path, dest_dir: Path) -> Path | None:
    try:
        with zipfile.ZipFile(archive) as zf:
            member = _find_metadata_member(zf.namelist())
            if member is None:
                return None
            dest_dir.mkdir(parents=True, exist_ok=True)
            dest = dest_dir / METADATA_FILENAME
            dest.write_bytes(zf.read(member))
            return dest
    except (zipfile.BadZipFile, OSError):
        return None


def _find_metadata_member(names: list[str]) -> str | None:
    # Shallowest match wins: archives may nest the artifact in a top folder
    candidates = [n for n in names if PurePosixPath(n).name == METADATA_FILENAME]
    if not candidates:
        return None
    return min(candidates, key=lambda n: (n.count("/"), n))
