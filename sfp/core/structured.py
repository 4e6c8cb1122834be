"""Narrowing helpers for parsed JSON and TOML.

Artifact metadata, the released-version listing and sfp.toml all arrive as
untyped dicts and lists. Values of the wrong type read as missing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

StrDict = dict[str, object]
ObjList = list[object]


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as a dict if it is one with only string keys."""
    if not isinstance(obj, dict):
        return None
    d = cast(dict[object, object], obj)
    if not all(isinstance(k, str) for k in d):
        return None
    return cast(StrDict, d)


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string value; None if missing, not a str, or blank."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def get_flag(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = table.get(key)
    return value if isinstance(value, bool) else default


def get_table(table: Mapping[str, object], key: str) -> StrDict:
    """Nested table, or an empty dict when absent or not a table."""
    return as_str_dict(table.get(key)) or {}
