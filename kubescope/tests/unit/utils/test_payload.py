"""Tests for tolerant payload accessors."""

from __future__ import annotations

import pytest

from kubescope.utils.payload import as_dict, coerce_int, dict_items, object_name, object_namespace


class TestPayloadAccessors:
    """Tests for the payload helper functions."""

    @pytest.mark.parametrize("value", [None, [], "x", 3])
    def test_as_dict_non_dict(self, value: object) -> None:
        """Anything but a dict reads as empty."""
        assert as_dict(value) == {}

    def test_dict_items_filters_entries(self) -> None:
        """Only dict entries of a list survive."""
        assert dict_items([{"a": 1}, None, "x", {"b": 2}]) == [{"a": 1}, {"b": 2}]
        assert dict_items({"a": 1}) == []

    @pytest.mark.parametrize(
        ("item", "expected"),
        [
            ({"metadata": {"name": "api", "namespace": "prod"}}, ("api", "prod")),
            ({"metadata": None}, (None, None)),
            ({"metadata": {"name": 7, "namespace": ""}}, (None, None)),
            (None, (None, None)),
        ],
    )
    def test_object_identity(self, item: object, expected: tuple[str | None, str | None]) -> None:
        """Name and namespace are read only when they are non-empty strings."""
        assert (object_name(item), object_namespace(item)) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3, 3), ("4", 4), (True, 0), ("x", 0), (None, 0), (float("inf"), 0)],
    )
    def test_coerce_int(self, value: object, expected: int) -> None:
        """Unusable numbers fall back to the default."""
        assert coerce_int(value) == expected
