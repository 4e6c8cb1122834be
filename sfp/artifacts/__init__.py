"""Artifact discovery, naming and metadata."""

from .locator import ArtifactFilePaths, fetch_artifact_file_paths, find_artifacts
from .metadata import PackageMetadata, load_package_metadata, resolve_package_metadata
from .naming import CandidateIdentity, normalize_version, parse_artifact_filename

__all__ = [
    # locator
    "ArtifactFilePaths",
    "fetch_artifact_file_paths",
    "find_artifacts",
    # metadata
    "PackageMetadata",
    "load_package_metadata",
    "resolve_package_metadata",
    # naming
    "CandidateIdentity",
    "normalize_version",
    "parse_artifact_filename",
]
