"""Tests for sfp.artifacts.metadata module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sfp.artifacts.locator import ArtifactFilePaths
from sfp.artifacts.metadata import (
    PackageMetadata,
    load_package_metadata,
    resolve_package_metadata,
)
from sfp.artifacts.naming import CandidateIdentity
from sfp.core.result import Err, Ok


def _metadata_file(
    directory: Path,
    name: str,
    *,
    package: str,
    version: str,
    package_type: str = "unlocked",
    version_id: str = "04t000000000001",
) -> ArtifactFilePaths:
    path = directory / f"{name}.json"
    path.write_text(
        json.dumps(
            {
                "package_name": package,
                "package_version_number": version,
                "package_type": package_type,
                "package_version_id": version_id,
            }
        ),
        encoding="utf-8",
    )
    return ArtifactFilePaths(source=directory / name, metadata_path=path)


class TestPackageMetadata:
    def test_from_dict(self) -> None:
        metadata = PackageMetadata.from_dict(
            {
                "package_name": "core",
                "package_version_number": "1.0.0",
                "package_type": "unlocked",
                "package_version_id": "04tX1",
                "sourceVersion": "abc123",
            }
        )
        assert metadata == PackageMetadata("core", "1.0.0", "unlocked", "04tX1")

    def test_requires_name_and_version(self) -> None:
        assert PackageMetadata.from_dict({"package_name": "core"}) is None

    @pytest.mark.parametrize(
        ("package_type", "unlocked"),
        [
            ("unlocked", True),
            ("Unlocked", True),
            ("managed", False),
            ("source", False),
            ("", False),
        ],
    )
    def test_is_unlocked(self, package_type: str, unlocked: bool) -> None:
        assert PackageMetadata("core", "1.0.0", package_type).is_unlocked is unlocked


class TestLoadPackageMetadata:
    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "artifact_metadata.json"
        path.write_text("{not json", encoding="utf-8")

        result = load_package_metadata(path)

        assert isinstance(result, Err)
        assert result.error.kind == "metadata_invalid"

    def test_non_object_root(self, tmp_path: Path) -> None:
        path = tmp_path / "artifact_metadata.json"
        path.write_text("[]", encoding="utf-8")

        result = load_package_metadata(path)

        assert isinstance(result, Err)
        assert result.error.kind == "metadata_invalid"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_package_metadata(tmp_path / "nope.json")
        assert isinstance(result, Err)


class TestResolvePackageMetadata:
    def test_matches_on_name_and_normalized_version(self, tmp_path: Path) -> None:
        files = [
            _metadata_file(tmp_path, "a", package="core", version="2.0.0", version_id="04tA"),
            _metadata_file(tmp_path, "b", package="ui", version="1.0.0", version_id="04tB"),
            _metadata_file(tmp_path, "c", package="core", version="1.0.0", version_id="04tC"),
        ]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Ok)
        assert result.value.package_version_id == "04tC"

    def test_not_found_names_package_and_dotted_version(self, tmp_path: Path) -> None:
        files = [_metadata_file(tmp_path, "a", package="core", version="2.0.0")]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Err)
        assert result.error.kind == "metadata_not_found"
        assert result.error.message == "Unable to find artifact metadata for core Version 1.0.0"

    def test_no_metadata_files(self) -> None:
        result = resolve_package_metadata([], CandidateIdentity("core", "1-0-0"))
        assert isinstance(result, Err)
        assert result.error.kind == "metadata_not_found"

    def test_identical_duplicates_resolve_to_first(self, tmp_path: Path) -> None:
        files = [
            _metadata_file(tmp_path, "zipped", package="core", version="1.0.0"),
            _metadata_file(tmp_path, "unpacked", package="core", version="1.0.0"),
        ]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Ok)

    def test_conflicting_duplicates_are_ambiguous(self, tmp_path: Path) -> None:
        files = [
            _metadata_file(tmp_path, "a", package="core", version="1.0.0", version_id="04tA"),
            _metadata_file(tmp_path, "b", package="core", version="1.0.0", version_id="04tB"),
        ]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Err)
        assert result.error.kind == "metadata_ambiguous"
        assert result.error.hint is not None
        assert "a.json" in result.error.hint and "b.json" in result.error.hint

    def test_broken_file_ignored_when_another_matches(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("{", encoding="utf-8")
        files = [
            ArtifactFilePaths(source=tmp_path / "broken", metadata_path=broken),
            _metadata_file(tmp_path, "good", package="core", version="1.0.0"),
        ]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Ok)

    def test_broken_file_reported_when_nothing_matches(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("{", encoding="utf-8")
        files = [ArtifactFilePaths(source=tmp_path / "broken", metadata_path=broken)]

        result = resolve_package_metadata(files, CandidateIdentity("core", "1-0-0"))

        assert isinstance(result, Err)
        assert result.error.kind == "metadata_invalid"
