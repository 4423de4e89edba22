"""Controllers for kubescope."""
