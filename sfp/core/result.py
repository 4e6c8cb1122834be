"""Result type used across the publish pipeline.

Every step that can fail for a single artifact (metadata lookup, promotion
check, script invocation) returns a Result instead of raising, so the
orchestrator can record the failure and move on to the next artifact.

Usage:
    match resolve_package_metadata(paths, candidate):
        case Ok(metadata):
            print(metadata.package_version_id)
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def unwrap_or(self, default: T) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
