"""Utility functions for constraint analysis."""

from tether.utils.metrics import Frame, constraint_summary, constraint_violations

__all__ = ["Frame", "constraint_summary", "constraint_violations"]
