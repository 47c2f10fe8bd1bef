"""Utility functions for checking compiled constraints against concrete frames."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from tether.core.types import Attribute, ConstraintRecord, Insets, Priority, Relation


@dataclass(frozen=True)
class Frame:
    """Resolved geometry of an element, in the coordinate space of its records."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    margins: Insets = field(default_factory=Insets)

    def value(self, attribute: Attribute) -> float:
        """Numeric value of ``attribute`` for this frame."""
        if attribute is Attribute.NOT_AN_ATTRIBUTE:
            return 0.0
        return _RESOLVERS[attribute](self)


_RESOLVERS = {
    Attribute.TOP: lambda f: f.y,
    Attribute.TOP_MARGIN: lambda f: f.y + f.margins.top,
    Attribute.LEFT: lambda f: f.x,
    Attribute.LEFT_MARGIN: lambda f: f.x + f.margins.left,
    Attribute.RIGHT: lambda f: f.x + f.width,
    Attribute.RIGHT_MARGIN: lambda f: f.x + f.width - f.margins.right,
    Attribute.BOTTOM: lambda f: f.y + f.height,
    Attribute.BOTTOM_MARGIN: lambda f: f.y + f.height - f.margins.bottom,
    Attribute.CENTER_X: lambda f: f.x + f.width / 2,
    Attribute.CENTER_Y: lambda f: f.y + f.height / 2,
    Attribute.WIDTH: lambda f: f.width,
    Attribute.HEIGHT: lambda f: f.height,
}


def record_residuals(
    records: Sequence[ConstraintRecord], frames: Mapping[Any, Frame]
) -> np.ndarray:
    """
    Compute ``lhs - (multiplier * rhs + constant)`` for every record.

    Args:
        records: Compiled constraint records
        frames: Frame of every element the records refer to

    Returns:
        Residuals, one per record; zero means the equality holds exactly

    Raises:
        KeyError: If an element referenced by a record has no frame
    """
    if not records:
        return np.zeros(0)

    lhs = np.array([_lookup(frames, r.subject).value(r.subject_attribute) for r in records])
    rhs = np.array(
        [
            0.0 if r.object is None else _lookup(frames, r.object).value(r.object_attribute)
            for r in records
        ]
    )
    multipliers = np.array([r.multiplier for r in records], dtype=float)
    constants = np.array([r.constant for r in records], dtype=float)

    return lhs - (multipliers * rhs + constants)


def constraint_violations(
    records: Sequence[ConstraintRecord],
    frames: Mapping[Any, Frame],
    tolerance: float = 1e-6,
) -> dict[str, Any]:
    """
    Check which records a set of frames fails to satisfy.

    Args:
        records: Compiled constraint records
        frames: Frame of every element the records refer to
        tolerance: Residual magnitude still considered satisfied

    Returns:
        Dictionary with residuals, a violation mask and violation statistics
    """
    residuals = record_residuals(records, frames)
    relations = [r.relation for r in records]

    violated = np.zeros(len(records), dtype=bool)
    for i, relation in enumerate(relations):
        if relation is Relation.EQUAL:
            violated[i] = abs(residuals[i]) > tolerance
        elif relation is Relation.LESS_OR_EQUAL:
            violated[i] = residuals[i] > tolerance
        else:
            violated[i] = residuals[i] < -tolerance

    priorities = np.array([r.priority for r in records], dtype=float)
    required = priorities >= Priority.REQUIRED

    return {
        "residuals": residuals,
        "violated": violated,
        "total_violations": int(violated.sum()),
        "required_violations": int((violated & required).sum()),
        "violation_rate": float(violated.mean()) if len(records) else 0.0,
        "violated_indices": np.flatnonzero(violated).tolist(),
    }


def constraint_summary(records: Sequence[ConstraintRecord]) -> dict[str, Any]:
    """
    Summarize a batch of records.

    Returns:
        Dictionary with counts per relation and per subject attribute, and
        priority statistics
    """
    if not records:
        return {
            "total": 0,
            "by_relation": {},
            "by_attribute": {},
            "priority_mean": 0.0,
            "priority_min": 0.0,
            "priority_max": 0.0,
            "required_fraction": 0.0,
        }

    priorities = np.array([r.priority for r in records], dtype=float)
    return {
        "total": len(records),
        "by_relation": dict(Counter(r.relation.value for r in records)),
        "by_attribute": dict(Counter(r.subject_attribute.value for r in records)),
        "priority_mean": float(np.mean(priorities)),
        "priority_min": float(np.min(priorities)),
        "priority_max": float(np.max(priorities)),
        "required_fraction": float(np.mean(priorities >= Priority.REQUIRED)),
    }


def _lookup(frames: Mapping[Any, Frame], element: Any) -> Frame:
    try:
        return frames[element]
    except KeyError:
        raise KeyError(f"No frame given for {element!r}") from None
