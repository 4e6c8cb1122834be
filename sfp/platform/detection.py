"""Host detection for launching publish scripts.

Only one distinction matters here: Windows hosts run the script through
`cmd.exe /c`, everything else through `bash -e` (exit on first failing
command).
"""

from __future__ import annotations

import sys
from enum import Enum

__all__ = [
    "Platform",
    "detect_platform",
]


class Platform(Enum):
    """Host family, keyed by the shell that runs publish scripts."""

    POSIX = "posix"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @property
    def script_launcher(self) -> tuple[str, ...]:
        if self is Platform.WINDOWS:
            return ("cmd.exe", "/c")
        return ("bash", "-e")


def detect_platform(sys_platform: str | None = None) -> Platform:
    """Classify sys.platform (or the given value)."""
    name = (sys_platform if sys_platform is not None else sys.platform).lower()
    # cygwin and msys ship bash but are driven from Windows CI agents
    if name.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.POSIX
