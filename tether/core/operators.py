"""Named combinators mirroring the expression operators."""

from tether.core.expressions import (
    CenterExpression,
    EdgesExpression,
    LayoutAxis,
    LengthExpression,
    LinearExpression,
    Relationship,
    is_number,
)
from tether.core.types import DivisionByZero, Insets, Offset, Relation


def literal(value: float) -> LengthExpression:
    """
    Create an element-less length holding a constant.

    Example:
        >>> activate(literal(44) <= button.height)
    """
    return LengthExpression.literal(value)


def with_offset(
    expression: LinearExpression | EdgesExpression | CenterExpression,
    value: float | Offset | Insets,
) -> LinearExpression | EdgesExpression | CenterExpression:
    """
    Equivalent to ``expression + value``.

    Offsets accumulate on linear expressions and replace the offset of edges
    and center groups.
    """
    if isinstance(expression, (EdgesExpression, CenterExpression)):
        return expression.offset_by(value)
    return expression.plus(value)


def with_scale(expression: LinearExpression, factor: float) -> LinearExpression:
    """Equivalent to ``expression * factor``; replaces any previous factor."""
    return expression.scaled_by(factor)


def with_inverse_scale(expression: LinearExpression, divisor: float) -> LinearExpression:
    """Equivalent to ``expression / divisor``."""
    return expression.divided_by(divisor)


def with_priority(expression: LinearExpression, priority: float) -> LinearExpression:
    """Equivalent to ``expression @ priority``."""
    return expression.with_priority(priority)


def as_range(expression: LengthExpression, low: float, high: float) -> list[Relationship]:
    """
    Keep a length between two bounds, given in any order.

    Example:
        >>> activate(*as_range(view.width, 50, 120))
    """
    return expression.as_range(low, high)


def equal(lhs, rhs) -> Relationship:
    """Relationship ``lhs == rhs``; numbers on the left are accepted for lengths."""
    return _relate(lhs, rhs, Relation.EQUAL)


def at_most(lhs, rhs) -> Relationship:
    """Relationship ``lhs <= rhs``."""
    return _relate(lhs, rhs, Relation.LESS_OR_EQUAL)


def at_least(lhs, rhs) -> Relationship:
    """Relationship ``lhs >= rhs``."""
    return _relate(lhs, rhs, Relation.GREATER_OR_EQUAL)


def _relate(lhs, rhs, relation: Relation) -> Relationship:
    if is_number(lhs):
        lhs = literal(lhs)
    if not isinstance(lhs, LinearExpression):
        raise TypeError(f"Cannot relate {type(lhs).__name__}")
    coerced = lhs.coerce(rhs)
    if coerced is None:
        raise TypeError(f"Cannot relate {type(lhs).__name__} to {type(rhs).__name__}")
    return Relationship(lhs, coerced, relation)


def ratio(numerator: float, denominator: float) -> float:
    """
    Width-to-height proportion; ``ratio(1, 2)`` is ``0.5``.

    Raises:
        DivisionByZero: If denominator is zero
    """
    if denominator == 0:
        raise DivisionByZero(f"Invalid ratio {numerator}:{denominator}")
    return numerator / denominator


def compression_resistance(axis: LayoutAxis, priority: float, sink=None) -> None:
    """Equivalent to ``axis.resist_compression(priority)``."""
    axis.resist_compression(priority, sink=sink)


def expansion_resistance(axis: LayoutAxis, priority: float, sink=None) -> None:
    """Equivalent to ``axis.resist_expansion(priority)``."""
    axis.resist_expansion(priority, sink=sink)
