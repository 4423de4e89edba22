"""Response shaping shared by the routers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel


def dump(model: BaseModel) -> dict[str, Any]:
    """camelCase JSON-ready dict for ``model``."""
    return model.model_dump(by_alias=True, mode="json")


def dump_all(models: Iterable[BaseModel]) -> list[dict[str, Any]]:
    return [dump(model) for model in models]


def first_of(*values: Any, default: Any = None) -> Any:
    """First argument that is not None."""
    for value in values:
        if value is not None:
            return value
    return default
