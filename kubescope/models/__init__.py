"""Data models for kubescope."""
