"""Artifact filename conventions.

Build stages write archives named `<package>_sfpowerscripts_artifact_<version>.zip`
where the version uses dashes (`1-2-0-4`). The filename is only a hint: the
authoritative identity lives in the metadata file, matched by
sfp.artifacts.metadata.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "ARTIFACT_MARKER",
    "CandidateIdentity",
    "normalize_version",
    "parse_artifact_filename",
]

ARTIFACT_MARKER = "sfpowerscripts_artifact"

_ARTIFACT_RE = re.compile(rf"^(?P<package>.*){ARTIFACT_MARKER}_(?P<version>.*)\.zip$")


def normalize_version(raw_version: str) -> str:
    """Convert a filename version to the dotted form used in metadata.

    `1-2-3` -> `1.2.3`. Every dash becomes a dot. Dotted input is returned
    unchanged.
    """
    return raw_version.replace("-", ".")


@dataclass(frozen=True, slots=True)
class CandidateIdentity:
    """Package identity guessed from an artifact filename.

    Attributes:
        package_name: Package name, may be empty
        raw_version: Version exactly as written in the filename (dash form)
    """

    package_name: str
    raw_version: str

    @property
    def version(self) -> str:
        """Normalized dotted version."""
        return normalize_version(self.raw_version)

    @property
    def label(self) -> str:
        """Label used in failure lists: `<name> v<raw version>`."""
        return f"{self.package_name} v{self.raw_version}"

    @property
    def tag(self) -> str:
        return f"{self.package_name}_v{self.version}"


def parse_artifact_filename(path: Path | str) -> CandidateIdentity | None:
    """Extract the package identity from an artifact archive name.

    Only the base name is considered. Returns None when the name does not
    follow the artifact convention; callers skip such entries silently.
    """
    name = Path(path).name
    m = _ARTIFACT_RE.match(name)
    if m is None:
        return None

    package = m.group("package")
    if package:
        # Drop the separator between name and marker
        package = package[:-1]
    return CandidateIdentity(package_name=package, raw_version=m.group("version"))
