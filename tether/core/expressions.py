"""Constraint expressions and the operators that combine them.

Expressions are immutable values. Every operator returns a new expression, so
an attribute read such as ``view.width`` can be reused freely::

    >>> half = (parent.width * 0.5 + 10) @ 750
    >>> child.width = half
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, ClassVar

from tether.core.types import (
    Attribute,
    Axis,
    DivisionByZero,
    Insets,
    Offset,
    Relation,
)

if TYPE_CHECKING:
    from tether.bridge.compiler import PendingConstraint
    from tether.bridge.sinks import AxisPrioritySink, ConstraintSink


def is_number(value: Any) -> bool:
    """True for real numbers, excluding booleans."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class LinearExpression:
    """
    Common shape of length, position and ratio expressions.

    Reads as ``element.attribute * multiplier + constant`` with an optional
    priority. ``kind`` tags the concrete variant so that relation compilation
    can dispatch on it.
    """

    element: Any | None = None
    attribute: Attribute = Attribute.NOT_AN_ATTRIBUTE
    constant: float = 0.0
    multiplier: float = 1.0
    priority: float | None = None

    kind: ClassVar[str] = "linear"

    def plus(self, constant: float) -> LinearExpression:
        """Add a distance to the constant term."""
        return replace(self, constant=self.constant + constant)

    def minus(self, constant: float) -> LinearExpression:
        return replace(self, constant=self.constant - constant)

    def scaled_by(self, factor: float) -> LinearExpression:
        """
        Set the multiplier.

        The factor replaces any previous multiplier rather than composing
        with it: ``(e * 2) * 3`` has a multiplier of 3.
        """
        return replace(self, multiplier=float(factor))

    def divided_by(self, divisor: float) -> LinearExpression:
        """
        Divide the multiplier by ``divisor``.

        On an unscaled expression this sets the multiplier to ``1 / divisor``;
        after ``e * k``, dividing by ``k`` brings the multiplier back to 1.
        Unlike ``scaled_by``, this composes with a previous multiplier:
        ``(e * 3) / 2`` has a multiplier of 1.5, not 0.5.
        """
        if divisor == 0:
            raise DivisionByZero(f"Cannot divide {self!r} by zero")
        return replace(self, multiplier=self.multiplier / divisor)

    def with_priority(self, priority: float) -> LinearExpression:
        return replace(self, priority=priority)

    @property
    def has_element(self) -> bool:
        return self.element is not None

    @property
    def is_identity(self) -> bool:
        """True when the expression carries no offset and no scale."""
        return self.constant == 0 and self.multiplier == 1

    def coerce(self, other: Any) -> LinearExpression | None:
        """Bring ``other`` to this expression's kind, or None when impossible."""
        if isinstance(other, LinearExpression) and other.kind == self.kind:
            return other
        return None

    def equal_to(self, other: Any) -> Relationship:
        """Build an ``equal`` relationship; ``==`` keeps value equality."""
        rhs = self.coerce(other)
        if rhs is None:
            raise TypeError(
                f"Cannot relate {type(self).__name__} to {type(other).__name__}"
            )
        return Relationship(self, rhs, Relation.EQUAL)

    # Operators

    def __add__(self, other: Any) -> LinearExpression:
        if not is_number(other):
            return NotImplemented
        return self.plus(other)

    __radd__ = __add__

    def __sub__(self, other: Any) -> LinearExpression:
        if not is_number(other):
            return NotImplemented
        return self.minus(other)

    def __mul__(self, other: Any) -> LinearExpression:
        if not is_number(other):
            return NotImplemented
        return self.scaled_by(other)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> LinearExpression:
        if not is_number(other):
            return NotImplemented
        return self.divided_by(other)

    def __matmul__(self, other: Any) -> LinearExpression:
        """``expression @ 751`` sets the priority."""
        if not is_number(other):
            return NotImplemented
        return self.with_priority(other)

    def __le__(self, other: Any) -> Relationship:
        rhs = self.coerce(other)
        if rhs is None:
            return NotImplemented
        return Relationship(self, rhs, Relation.LESS_OR_EQUAL)

    def __ge__(self, other: Any) -> Relationship:
        rhs = self.coerce(other)
        if rhs is None:
            return NotImplemented
        return Relationship(self, rhs, Relation.GREATER_OR_EQUAL)


@dataclass(frozen=True)
class LengthExpression(LinearExpression):
    """A width, a height, or a bare literal distance (no element)."""

    kind: ClassVar[str] = "length"

    def __post_init__(self) -> None:
        if self.element is None:
            if self.attribute is not Attribute.NOT_AN_ATTRIBUTE:
                raise ValueError(
                    f"A literal length cannot carry attribute {self.attribute.value}"
                )
        elif not self.attribute.is_dimension:
            raise ValueError(f"{self.attribute.value} is not a length attribute")

    @classmethod
    def literal(cls, value: float) -> LengthExpression:
        return cls(constant=float(value))

    def coerce(self, other: Any) -> LinearExpression | None:
        if is_number(other):
            return LengthExpression.literal(other)
        return super().coerce(other)

    def as_range(self, low: float, high: float) -> list[Relationship]:
        """
        Relationships keeping this length between two bounds.

        Bounds may be given in either order.

        Returns:
            ``[low <= self, self <= high]``
        """
        low, high = min(low, high), max(low, high)
        return [
            Relationship(LengthExpression.literal(low), self, Relation.LESS_OR_EQUAL),
            Relationship(self, LengthExpression.literal(high), Relation.LESS_OR_EQUAL),
        ]

    def within(
        self, low: float, high: float, sink: ConstraintSink | None = None
    ) -> list[PendingConstraint]:
        """
        Activate ``as_range(low, high)`` immediately.

        Without an explicit sink, the sink of the element is used when it has one.
        """
        # Import at runtime to avoid circular dependencies
        from tether.bridge.compiler import activate

        if sink is None:
            sink = getattr(self.element, "sink", None)
        return activate(*self.as_range(low, high), sink=sink)


@dataclass(frozen=True)
class PositionExpression(LinearExpression):
    """An edge or center line of an element; the element is mandatory."""

    kind: ClassVar[str] = "position"

    def __post_init__(self) -> None:
        if self.element is None:
            raise ValueError("A position expression requires an element")
        if not self.attribute.is_position:
            raise ValueError(f"{self.attribute.value} is not a position attribute")


@dataclass(frozen=True)
class RatioExpression(LinearExpression):
    """
    Width-to-height proportion of an element.

    Read as ``width == element.height * multiplier``. A bare number on the
    right of a ratio relation refers to the left-hand element's own height.
    """

    attribute: Attribute = Attribute.HEIGHT

    kind: ClassVar[str] = "ratio"

    def __post_init__(self) -> None:
        if self.element is None:
            raise ValueError("A ratio expression requires an element")
        if self.attribute is not Attribute.HEIGHT:
            raise ValueError("A ratio expression always refers to a height")

    def coerce(self, other: Any) -> LinearExpression | None:
        if is_number(other):
            return RatioExpression(element=self.element, multiplier=float(other))
        return super().coerce(other)


@dataclass(frozen=True)
class Relationship:
    """A pending ``lhs <relation> rhs``; nothing is registered until compiled."""

    lhs: LinearExpression
    rhs: LinearExpression
    relation: Relation = Relation.EQUAL

    def __bool__(self) -> bool:
        raise TypeError(
            "A relationship has no truth value; chained comparisons such as "
            "'a <= b <= c' drop a bound, use as_range() instead"
        )


@dataclass(frozen=True)
class EdgesExpression:
    """Top, left, bottom and right edges of an element, optionally inset."""

    element: Any
    insets: Insets = field(default_factory=Insets)
    uses_margins: bool = False

    def offset_by(self, value: float | Offset | Insets) -> EdgesExpression:
        """Replace the insets; positive values shrink, negative values expand."""
        if isinstance(value, Insets):
            insets = value
        elif isinstance(value, Offset):
            insets = Insets.from_offset(value)
        elif is_number(value):
            insets = Insets.uniform(value)
        else:
            raise TypeError(f"Cannot offset edges by {type(value).__name__}")
        return replace(self, insets=insets)

    def __add__(self, other: Any) -> EdgesExpression:
        if not (is_number(other) or isinstance(other, (Offset, Insets))):
            return NotImplemented
        return self.offset_by(other)

    def __sub__(self, other: Any) -> EdgesExpression:
        if not (is_number(other) or isinstance(other, (Offset, Insets))):
            return NotImplemented
        return self.offset_by(-other)


@dataclass(frozen=True)
class CenterExpression:
    """Center point of an element, optionally displaced."""

    element: Any
    offset: Offset = field(default_factory=Offset)

    def offset_by(self, value: float | Offset) -> CenterExpression:
        """Replace the displacement; positive values move right and down."""
        if isinstance(value, Offset):
            offset = value
        elif is_number(value):
            offset = Offset.uniform(value)
        else:
            raise TypeError(f"Cannot offset a center by {type(value).__name__}")
        return replace(self, offset=offset)

    def __add__(self, other: Any) -> CenterExpression:
        if not (is_number(other) or isinstance(other, Offset)):
            return NotImplemented
        return self.offset_by(other)

    def __sub__(self, other: Any) -> CenterExpression:
        if not (is_number(other) or isinstance(other, Offset)):
            return NotImplemented
        return self.offset_by(-other)


@dataclass(frozen=True)
class LayoutAxis:
    """One axis of one element, target of content priorities."""

    element: Any
    axis: Axis = Axis.HORIZONTAL

    def resist_compression(
        self, priority: float, sink: AxisPrioritySink | None = None
    ) -> None:
        """
        Set how strongly the element refuses to shrink below its content.

        A lower priority lets the element shrink more readily.
        """
        target = _axis_sink(sink, self.element)
        target.set_compression_resistance(self.element, self.axis, priority)

    def resist_expansion(
        self, priority: float, sink: AxisPrioritySink | None = None
    ) -> None:
        """
        Set how strongly the element refuses to grow beyond its content.

        A lower priority lets the element grow more readily.
        """
        target = _axis_sink(sink, self.element)
        target.set_expansion_resistance(self.element, self.axis, priority)


def _axis_sink(sink: AxisPrioritySink | None, element: Any) -> AxisPrioritySink:
    if sink is None:
        sink = getattr(element, "sink", None)
    if sink is not None:
        return sink
    # Import at runtime to avoid circular dependencies
    from tether.bridge.sinks import HierarchySink

    return HierarchySink()
