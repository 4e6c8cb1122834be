from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

from sfp.core.result import Err, Ok, Result
from sfp.platform.detection import Platform
from sfp.platform.process import ProcessError
from sfp.services.publish import executor as executor_mod
from sfp.services.publish.executor import ScriptPublisher, ensure_script_exists
from sfp.services.publish.model import PublishRequest

REQUEST = PublishRequest(
    package_name="core",
    raw_version="1-0-0",
    artifact=Path("artifacts/core_sfpowerscripts_artifact_1-0-0.zip"),
    promoted_only=True,
)


def test_script_args() -> None:
    assert REQUEST.script_args() == [
        "core",
        "1-0-0",
        str(Path("artifacts/core_sfpowerscripts_artifact_1-0-0.zip")),
        "true",
    ]


def test_ensure_script_exists(tmp_path: Path) -> None:
    script = tmp_path / "publish.sh"

    missing = ensure_script_exists(script)
    assert isinstance(missing, Err)
    assert missing.error.kind == "script_missing"
    assert missing.error.message == f"Script path {script} does not exist"

    script.write_text("exit 0\n", encoding="utf-8")
    assert ensure_script_exists(script) == Ok(None)


def test_posix_command(tmp_path: Path) -> None:
    publisher = ScriptPublisher(
        script_path=Path("publish.sh"), cwd=tmp_path, platform=Platform.POSIX
    )
    assert publisher.command(REQUEST) == ["bash", "-e", "publish.sh", *REQUEST.script_args()]


def test_windows_command(tmp_path: Path) -> None:
    publisher = ScriptPublisher(
        script_path=Path("publish.cmd"), cwd=tmp_path, platform=Platform.WINDOWS
    )
    assert publisher.command(REQUEST) == [
        "cmd.exe",
        "/c",
        "publish.cmd",
        *REQUEST.script_args(),
    ]


def test_publish_failure_maps_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run_quiet(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
        del cwd
        return Err(ProcessError(command=tuple(cmd), returncode=7, stdout="", stderr=""))

    monkeypatch.setattr(executor_mod, "run_quiet", fake_run_quiet)
    publisher = ScriptPublisher(script_path=Path("p.sh"), cwd=tmp_path, platform=Platform.POSIX)

    result = publisher.publish(REQUEST)

    assert isinstance(result, Err)
    assert result.error.kind == "publish_failed"
    assert result.error.message == "Publish script failed for core (exit 7)"


def test_publish_launch_error_includes_detail(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_run_quiet(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
        del cwd
        return Err(
            ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr="No such file")
        )

    monkeypatch.setattr(executor_mod, "run_quiet", fake_run_quiet)
    publisher = ScriptPublisher(script_path=Path("p.sh"), cwd=tmp_path, platform=Platform.POSIX)

    result = publisher.publish(REQUEST)

    assert isinstance(result, Err)
    assert result.error.message.endswith(": No such file")


@pytest.mark.skipif(
    sys.platform.startswith("win") or shutil.which("bash") is None, reason="needs bash"
)
class TestRealScript:
    def test_script_receives_positional_args(self, tmp_path: Path) -> None:
        out = tmp_path / "args.txt"
        script = tmp_path / "publish.sh"
        script.write_text(f'echo "$1|$2|$3|$4" > "{out}"\necho noise\n', encoding="utf-8")
        publisher = ScriptPublisher(script_path=script, cwd=tmp_path, platform=Platform.POSIX)

        result = publisher.publish(REQUEST)

        assert result == Ok(None)
        assert out.read_text(encoding="utf-8").strip() == "|".join(REQUEST.script_args())

    def test_fail_fast_semantics(self, tmp_path: Path) -> None:
        marker = tmp_path / "reached"
        script = tmp_path / "publish.sh"
        script.write_text(f'false\ntouch "{marker}"\n', encoding="utf-8")
        publisher = ScriptPublisher(script_path=script, cwd=tmp_path, platform=Platform.POSIX)

        result = publisher.publish(REQUEST)

        assert isinstance(result, Err)
        assert not marker.exists()
