"""Package-level metadata for kubescope."""

__version__ = "0.1.0"
