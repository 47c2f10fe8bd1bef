"""
Tether: an expression algebra for layout constraints.

Attributes of views combine with offsets, scales and priorities into
expressions, which compile into the linear constraint records consumed by a
layout solver::

    child.left = (parent.left_margin + 20) @ 751
    activate(*as_range(child.width, 50, 120))

Everything runs synchronously on the caller's thread. Like the UI toolkits
whose solvers it feeds, the package is not thread-safe; concurrent use from
several threads is undefined behaviour.
"""

__version__ = "0.1.0"
__author__ = "Tether Team"

# Core exports
from tether.bridge.compiler import PendingConstraint, RelationCompiler, activate, submit
from tether.bridge.sinks import HierarchySink, RecordingSink
from tether.core.operators import as_range, at_least, at_most, equal, literal, ratio
from tether.core.types import (
    Attribute,
    Axis,
    ConstraintRecord,
    Insets,
    LayoutConfig,
    LayoutError,
    Offset,
    Priority,
    Relation,
)
from tether.elements.view import View

__all__ = [
    "Attribute",
    "Axis",
    "ConstraintRecord",
    "HierarchySink",
    "Insets",
    "LayoutConfig",
    "LayoutError",
    "Offset",
    "PendingConstraint",
    "Priority",
    "RecordingSink",
    "Relation",
    "RelationCompiler",
    "View",
    "activate",
    "as_range",
    "at_least",
    "at_most",
    "equal",
    "literal",
    "ratio",
    "submit",
]
