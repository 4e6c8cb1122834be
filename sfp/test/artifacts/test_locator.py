"""Tests for sfp.artifacts.locator module."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

from sfp.artifacts.locator import (
    METADATA_FILENAME,
    ArtifactFilePaths,
    fetch_artifact_file_paths,
    find_artifacts,
)
from sfp.core.result import Err, Ok


def _zip_artifact(directory: Path, name: str, metadata: dict[str, str] | None) -> Path:
    path = directory / name
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("source/force-app/main.cls", "class Main {}")
        if metadata is not None:
            zf.writestr(f"{path.stem}/{METADATA_FILENAME}", json.dumps(metadata))
    return path


class TestFindArtifacts:
    def test_missing_directory_is_error(self, tmp_path: Path) -> None:
        result = find_artifacts(tmp_path / "missing")

        assert isinstance(result, Err)
        assert result.error.kind == "artifact_dir_missing"
        assert "does not exist" in result.error.message

    def test_file_instead_of_directory_is_error(self, tmp_path: Path) -> None:
        path = tmp_path / "artifacts"
        path.write_text("", encoding="utf-8")

        result = find_artifacts(path)

        assert isinstance(result, Err)

    def test_lists_marked_entries_recursively(self, tmp_path: Path) -> None:
        (tmp_path / "nested").mkdir()
        a = _zip_artifact(tmp_path, "core_sfpowerscripts_artifact_1-0-0.zip", None)
        b = _zip_artifact(tmp_path / "nested", "ui_sfpowerscripts_artifact_2-0-0.zip", None)
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

        result = find_artifacts(tmp_path)

        assert isinstance(result, Ok)
        assert set(result.value) == {a, b}

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert find_artifacts(tmp_path) == Ok([])


class TestFetchArtifactFilePaths:
    def test_extracts_metadata_from_zip(self, tmp_path: Path) -> None:
        artifacts = tmp_path / "artifacts"
        artifacts.mkdir()
        scratch = tmp_path / "scratch"
        meta = {"package_name": "core", "package_version_number": "1.0.0"}
        archive = _zip_artifact(artifacts, "core_sfpowerscripts_artifact_1-0-0.zip", meta)

        result = fetch_artifact_file_paths(artifacts, scratch)

        assert isinstance(result, Ok)
        assert len(result.value) == 1
        paths = result.value[0]
        assert paths.source == archive
        assert paths.metadata_path.is_relative_to(scratch)
        assert json.loads(paths.metadata_path.read_text(encoding="utf-8")) == meta

    def test_unpacked_directory(self, tmp_path: Path) -> None:
        unit = tmp_path / "core_sfpowerscripts_artifact"
        unit.mkdir()
        (unit / METADATA_FILENAME).write_text("{}", encoding="utf-8")

        result = fetch_artifact_file_paths(tmp_path, tmp_path / "scratch")

        assert result == Ok(
            [ArtifactFilePaths(source=unit, metadata_path=unit / METADATA_FILENAME)]
        )

    def test_skips_archives_without_metadata_and_bad_zips(self, tmp_path: Path) -> None:
        artifacts = tmp_path / "artifacts"
        artifacts.mkdir()
        _zip_artifact(artifacts, "core_sfpowerscripts_artifact_1-0-0.zip", None)
        (artifacts / "ui_sfpowerscripts_artifact_1-0-0.zip").write_bytes(b"not a zip")

        result = fetch_artifact_file_paths(artifacts, tmp_path / "scratch")

        assert result == Ok([])

    def test_same_stem_in_different_dirs_does_not_collide(self, tmp_path: Path) -> None:
        artifacts = tmp_path / "artifacts"
        (artifacts / "a").mkdir(parents=True)
        (artifacts / "b").mkdir(parents=True)
        name = "core_sfpowerscripts_artifact_1-0-0.zip"
        _zip_artifact(artifacts / "a", name, {"package_name": "core", "package_version_number": "1"})
        _zip_artifact(artifacts / "b", name, {"package_name": "core", "package_version_number": "2"})

        result = fetch_artifact_file_paths(artifacts, tmp_path / "scratch")

        assert isinstance(result, Ok)
        metadata_paths = {p.metadata_path for p in result.value}
        assert len(metadata_paths) == 2

    def test_missing_directory_is_error(self, tmp_path: Path) -> None:
        result = fetch_artifact_file_paths(tmp_path / "missing", tmp_path / "scratch")
        assert isinstance(result, Err)
        assert result.error.kind == "artifact_dir_missing"
