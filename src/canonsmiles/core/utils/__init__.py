"""Utility helpers: timing, planar geometry and element data."""
