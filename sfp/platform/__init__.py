"""Host and child-process helpers."""

from .detection import Platform, detect_platform
from .process import ProcessError, run, run_quiet

__all__ = [
    "Platform",
    "ProcessError",
    "detect_platform",
    "run",
    "run_quiet",
]
