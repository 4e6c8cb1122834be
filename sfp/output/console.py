"""Operator-facing console output.

The publish pipeline reports progress, per-artifact failures and the final
summary through ConsoleProtocol. Production code uses RichConsole; tests use
MockConsole and assert on the captured records.

Messages are always plain text. Package names, paths and script errors are
never interpreted as Rich markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles, valued by their Rich style string."""

    DEFAULT = ""
    SUCCESS = "green"
    ERROR = "red bold"
    WARNING = "yellow"
    INFO = "cyan"
    DIM = "dim"
    HEADER = "blue bold"

    def __str__(self) -> str:
        return self.name.lower()


# Prefix written before leveled messages
_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK ",
    Style.ERROR: "error: ",
    Style.WARNING: "warning: ",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def rule(self) -> None: ...


class RichConsole:
    """Console writing to the terminal through Rich."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        from rich.text import Text

        self._console.print(Text(message, style=style.value))

    def _leveled(self, style: Style, message: str) -> None:
        from rich.text import Text

        self._console.print(Text.assemble((_PREFIXES[style], style.value), message))

    def success(self, message: str) -> None:
        self._leveled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._leveled(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._leveled(Style.WARNING, message)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def rule(self) -> None:
        self._console.rule(style=Style.DIM.value)


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that records output instead of printing it."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.print(_PREFIXES[Style.SUCCESS] + message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(_PREFIXES[Style.ERROR] + message, Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(_PREFIXES[Style.WARNING] + message, Style.WARNING)

    def header(self, message: str) -> None:
        self.print(message, Style.HEADER)

    def rule(self) -> None:
        self.print("-" * 40, Style.DIM)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
