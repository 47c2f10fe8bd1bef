"""Core expression types, operators and hierarchy resolution."""

from tether.core.expressions import (
    CenterExpression,
    EdgesExpression,
    LengthExpression,
    PositionExpression,
    RatioExpression,
    Relationship,
)
from tether.core.hierarchy import common_ancestor
from tether.core.types import (
    DisjointHierarchy,
    DivisionByZero,
    InvalidPriority,
    UnderspecifiedConstraint,
)

__all__ = [
    "CenterExpression",
    "DisjointHierarchy",
    "DivisionByZero",
    "EdgesExpression",
    "InvalidPriority",
    "LengthExpression",
    "PositionExpression",
    "RatioExpression",
    "Relationship",
    "UnderspecifiedConstraint",
    "common_ancestor",
]
