"""Utility helpers shared across :mod:`fx_lira`."""
