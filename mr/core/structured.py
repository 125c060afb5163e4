"""Helpers for narrowing untyped TOML data.

Used at the config boundary: ``tomllib`` hands back ``dict[str, Any]`` and
these helpers turn it into checked, typed values.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict:
    """Get a nested table, or an empty dict when missing.

    Raises:
        TypeError: The key is present but is not a table.
    """
    value = table.get(key)
    if value is None:
        return {}
    d = as_str_dict(value)
    if d is None:
        raise TypeError(f"{key} must be a table")
    return d


def get_str(table: Mapping[str, object], key: str, *, strip: bool = True) -> str:
    """Get a string value ("" when missing).

    Surrounding whitespace is stripped unless ``strip`` is False, which is
    needed for values such as regular expressions where it is significant.
    """
    value = table.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value.strip() if strip else value


def get_int(table: Mapping[str, object], key: str) -> int:
    value = table.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer")
    return value


def get_bool(table: Mapping[str, object], key: str) -> bool:
    value = table.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...]:
    """Get a list of strings as a tuple (empty when missing)."""
    value = table.get(key)
    if value is None:
        return ()
    items = as_obj_list(value)
    if items is None or not all(isinstance(i, str) for i in items):
        raise TypeError(f"{key} must be a list of strings")
    return tuple(cast(list[str], items))


def get_table_list(table: Mapping[str, object], key: str) -> list[StrDict]:
    """Get an array of tables (``[[key]]`` in TOML)."""
    value = table.get(key)
    if value is None:
        return []
    items = as_obj_list(value)
    if items is None:
        raise TypeError(f"{key} must be an array of tables")
    out: list[StrDict] = []
    for i, item in enumerate(items):
        d = as_str_dict(item)
        if d is None:
            raise TypeError(f"{key}[{i}] must be a table")
        out.append(d)
    return out
