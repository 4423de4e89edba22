"""Resource parsing utilities for CPU and memory values.

Provides functions to parse Kubernetes resource quantity strings:
- parse_quantity: generic parser used for metrics usage (cores or bytes)
- parse_cpu: CPU strings to cores (float)
- memory_str_to_bytes: binary-suffixed memory strings to bytes
"""

import re
from typing import Any

# Suffix multipliers for parse_quantity(). Binary suffixes are checked first
# so "Mi" never matches the SI "M" entry.
_QUANTITY_MULTIPLIERS: dict[str, int] = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "K": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
}

_MEMORY_BYTES_MULTIPLIERS: tuple[tuple[str, int], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
)

_NUMBER = r"[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"
_NANO_RE = re.compile(rf"^({_NUMBER})n$")
_MILLI_RE = re.compile(rf"^({_NUMBER})m$")
_PLAIN_RE = re.compile(rf"^({_NUMBER})$")
_SUFFIXED_RE = re.compile(rf"^({_NUMBER})\s*([KMGT]i?)$")
_LEADING_NUMBER_RE = re.compile(rf"^[-+]?{_NUMBER}")


def parse_quantity(raw: Any) -> float:
    """Parse a Kubernetes resource quantity into a plain number.

    CPU forms resolve to cores and memory forms resolve to bytes. A bare
    number is returned unchanged because only the caller knows which of the
    two it is.

    - Nanocores: "250000000n" -> 0.25
    - Millicores: "250m" -> 0.25
    - Plain: "2" -> 2.0
    - Binary: "1Gi" -> 1073741824.0
    - SI: "1G" -> 1000000000.0

    Args:
        raw: Quantity as string or number. None and "" are treated as zero.

    Returns:
        Parsed value. Returns 0.0 when nothing numeric can be recovered.
    """
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)

    text = str(raw).strip()
    if not text:
        return 0.0

    if match := _NANO_RE.match(text):
        return float(match.group(1)) / 1e9
    if match := _MILLI_RE.match(text):
        return float(match.group(1)) / 1000
    if match := _PLAIN_RE.match(text):
        return float(match.group(1))
    if match := _SUFFIXED_RE.match(text):
        return float(match.group(1)) * _QUANTITY_MULTIPLIERS[match.group(2)]

    # Best effort, like parseFloat: keep a leading numeric prefix if present.
    if match := _LEADING_NUMBER_RE.match(text):
        try:
            return float(match.group(0))
        except ValueError:
            return 0.0
    return 0.0


def parse_cpu(cpu_str: str) -> float:
    """Parse CPU string to cores (float).

    Handles various CPU resource formats:
    - Nanocores: "500000000n" -> 0.5 cores
    - Microcores: "500000u" -> 0.5 cores
    - Millicores: "100m" -> 0.1 cores
    - Decimal: "1.5" -> 1.5 cores

    Args:
        cpu_str: CPU value as string (e.g., "100m", "1.5", "500")

    Returns:
        CPU value in cores as float. Returns 0.0 on parse error or empty string.
    """
    if not cpu_str:
        return 0.0

    cpu_str = str(cpu_str).strip()

    if cpu_str.endswith("u"):
        try:
            return float(cpu_str[:-1]) / 1_000_000
        except ValueError:
            return 0.0

    return parse_quantity(cpu_str) if _is_cpu_form(cpu_str) else 0.0


def _is_cpu_form(cpu_str: str) -> bool:
    return bool(
        _NANO_RE.match(cpu_str) or _MILLI_RE.match(cpu_str) or _PLAIN_RE.match(cpu_str)
    )


def memory_str_to_bytes(memory_str: str) -> float:
    """Convert memory string to bytes.

    Handles the binary suffixes Kubernetes reports for allocatable memory:
    - Ki: "1024Ki" -> 1048576 bytes
    - Mi: "512Mi" -> 536870912 bytes
    - Gi: "1Gi" -> 1073741824 bytes
    - Ti: "1Ti" -> 1099511627776 bytes

    Args:
        memory_str: Memory value as string (e.g., "512Mi", "1Gi")

    Returns:
        Memory value in bytes as float. Returns 0.0 on parse error or empty string.
    """
    if not memory_str:
        return 0.0

    memory_str = str(memory_str).strip()

    for suffix, mult in _MEMORY_BYTES_MULTIPLIERS:
        if memory_str.endswith(suffix):
            try:
                value = float(memory_str[:-2])
                return value * mult
            except ValueError:
                return 0.0

    # Handle plain bytes
    try:
        return float(memory_str)
    except ValueError:
        return 0.0
