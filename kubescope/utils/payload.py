"""Tolerant accessors for decoded kubectl JSON.

API payloads are untrusted: any field may be missing, null or of the wrong
type. These helpers return a safe empty value instead of raising.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Any


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def coerce_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    with suppress(ValueError, TypeError, OverflowError):
        return int(value)
    return default


def dict_items(value: Any) -> list[dict[str, Any]]:
    """Dict entries of a list value, skipping anything else."""
    return [item for item in as_list(value) if isinstance(item, dict)]


def object_name(item: Any) -> str | None:
    """``metadata.name`` of an API object, or None."""
    return as_str(as_dict(as_dict(item).get("metadata")).get("name"))


def object_namespace(item: Any) -> str | None:
    """``metadata.namespace`` of an API object, or None."""
    return as_str(as_dict(as_dict(item).get("metadata")).get("namespace"))


__all__ = [
    "as_dict",
    "as_list",
    "as_str",
    "coerce_int",
    "dict_items",
    "object_name",
    "object_namespace",
]
