"""HTTP surface for kubescope."""
