"""Utility functions for kubescope."""

from kubescope.utils.resource_parser import (
    memory_str_to_bytes,
    parse_cpu,
    parse_quantity,
)
from kubescope.utils.time_utils import format_age, parse_iso_timestamp

__all__ = [
    "format_age",
    "memory_str_to_bytes",
    "parse_cpu",
    "parse_iso_timestamp",
    "parse_quantity",
]
