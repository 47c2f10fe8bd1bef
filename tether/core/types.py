"""Core type definitions, error kinds and configuration with runtime validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LayoutError(Exception):
    """Base class for constraint authoring errors."""

    pass


class UnderspecifiedConstraint(LayoutError, ValueError):
    """Raised when a relation joins two expressions that carry no element."""

    pass


class DisjointHierarchy(LayoutError):
    """Raised when two elements share no common ancestor."""

    pass


class DivisionByZero(LayoutError, ZeroDivisionError):
    """Raised by inverse scaling or ratio construction with a zero divisor."""

    pass


class InvalidPriority(LayoutError, ValueError):
    """Raised when a priority falls outside the configured range."""

    pass


class Attribute(Enum):
    """Geometric property of an element."""

    TOP = "top"
    TOP_MARGIN = "topMargin"
    LEFT = "left"
    LEFT_MARGIN = "leftMargin"
    RIGHT = "right"
    RIGHT_MARGIN = "rightMargin"
    BOTTOM = "bottom"
    BOTTOM_MARGIN = "bottomMargin"
    CENTER_X = "centerX"
    CENTER_Y = "centerY"
    WIDTH = "width"
    HEIGHT = "height"
    NOT_AN_ATTRIBUTE = "notAnAttribute"

    @property
    def is_dimension(self) -> bool:
        return self in (Attribute.WIDTH, Attribute.HEIGHT)

    @property
    def is_position(self) -> bool:
        return not self.is_dimension and self is not Attribute.NOT_AN_ATTRIBUTE

    def with_margin(self) -> Attribute:
        """Margin-qualified counterpart of an edge; other attributes map to themselves."""
        return _MARGIN_OF.get(self, self)


_MARGIN_OF = {
    Attribute.TOP: Attribute.TOP_MARGIN,
    Attribute.LEFT: Attribute.LEFT_MARGIN,
    Attribute.RIGHT: Attribute.RIGHT_MARGIN,
    Attribute.BOTTOM: Attribute.BOTTOM_MARGIN,
}


class Relation(Enum):
    """Relation between the two sides of a constraint."""

    EQUAL = "=="
    LESS_OR_EQUAL = "<="
    GREATER_OR_EQUAL = ">="

    def mirrored(self) -> Relation:
        """Relation obtained when both sides are swapped."""
        if self is Relation.LESS_OR_EQUAL:
            return Relation.GREATER_OR_EQUAL
        if self is Relation.GREATER_OR_EQUAL:
            return Relation.LESS_OR_EQUAL
        return self


class Axis(Enum):
    """Layout axis used by content priorities."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Priority:
    """Well-known priority values; higher is more strongly enforced."""

    REQUIRED = 1000
    DEFAULT_HIGH = 750
    DEFAULT_LOW = 250


@dataclass(frozen=True)
class Offset:
    """Horizontal and vertical displacement."""

    horizontal: float = 0.0
    vertical: float = 0.0

    def __neg__(self) -> Offset:
        return Offset(-self.horizontal, -self.vertical)

    @classmethod
    def uniform(cls, value: float) -> Offset:
        return cls(float(value), float(value))


@dataclass(frozen=True)
class Insets:
    """Per-edge distances; positive values move an edge inwards."""

    top: float = 0.0
    left: float = 0.0
    bottom: float = 0.0
    right: float = 0.0

    def __neg__(self) -> Insets:
        return Insets(-self.top, -self.left, -self.bottom, -self.right)

    @classmethod
    def uniform(cls, value: float) -> Insets:
        value = float(value)
        return cls(value, value, value, value)

    @classmethod
    def from_offset(cls, offset: Offset) -> Insets:
        return cls(offset.vertical, offset.horizontal, offset.vertical, offset.horizontal)


@dataclass(frozen=True)
class ConstraintRecord:
    """Native constraint handed to the external solver.

    Reads as ``subject.attribute <relation> object.attribute * multiplier + constant``.
    """

    subject: Any
    subject_attribute: Attribute
    relation: Relation
    object: Any | None
    object_attribute: Attribute
    multiplier: float
    constant: float
    priority: float

    def __str__(self) -> str:
        lhs = f"{_label(self.subject)}.{self.subject_attribute.value}"
        if self.object is None:
            rhs = f"{self.constant:g}"
        else:
            rhs = f"{_label(self.object)}.{self.object_attribute.value}"
            if self.multiplier != 1:
                rhs += f" * {self.multiplier:g}"
            if self.constant:
                sign = "-" if self.constant < 0 else "+"
                rhs += f" {sign} {abs(self.constant):g}"
        return f"{lhs} {self.relation.value} {rhs} @{self.priority:g}"


def _label(element: Any) -> str:
    return getattr(element, "name", None) or type(element).__name__


@dataclass
class LayoutConfig:
    """Defaults applied while compiling and registering constraints."""

    default_priority: float = Priority.REQUIRED
    min_priority: float = 1
    max_priority: float = Priority.REQUIRED
    default_compression_resistance: float = Priority.DEFAULT_HIGH
    default_expansion_resistance: float = Priority.DEFAULT_LOW
    default_margin: float = 8.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.min_priority > self.max_priority:
            raise InvalidPriority(
                f"min_priority ({self.min_priority}) exceeds max_priority ({self.max_priority})"
            )

        for name in (
            "default_priority",
            "default_compression_resistance",
            "default_expansion_resistance",
        ):
            self.check_priority(getattr(self, name), name)

        if self.default_margin < 0:
            raise ValueError(f"default_margin must be non-negative, got {self.default_margin}")

    def check_priority(self, value: float, what: str = "priority") -> float:
        if not self.min_priority <= value <= self.max_priority:
            raise InvalidPriority(
                f"{what} must be in [{self.min_priority:g}, {self.max_priority:g}], got {value}"
            )
        return value


DEFAULT_CONFIG = LayoutConfig()
