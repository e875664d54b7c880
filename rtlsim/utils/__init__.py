"""Utility helpers (testbench configuration loading)."""
