"""Concrete element with the attribute-accessor surface."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from tether.bridge.compiler import (
    PendingConstraint,
    RelationCompiler,
    submit,
)
from tether.bridge.sinks import ConstraintSink
from tether.core.expressions import (
    CenterExpression,
    EdgesExpression,
    LayoutAxis,
    LengthExpression,
    PositionExpression,
    RatioExpression,
)
from tether.core.hierarchy import ancestors
from tether.core.operators import ratio
from tether.core.types import (
    DEFAULT_CONFIG,
    Attribute,
    Axis,
    ConstraintRecord,
    Insets,
    LayoutConfig,
)


class _AttributeAccessor:
    """Reading returns a fresh expression; assigning registers an equality."""

    expression_type: type = PositionExpression

    def __init__(self, attribute: Attribute):
        self.attribute = attribute

    def __get__(self, instance: View | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.expression_type(element=instance, attribute=self.attribute)

    def __set__(self, instance: View, value: Any) -> None:
        relationship = self.__get__(instance).equal_to(value)
        instance.constrain(RelationCompiler(instance.config).compile(relationship))


class _LengthAccessor(_AttributeAccessor):
    expression_type = LengthExpression


class _EdgesAccessor:
    def __init__(self, uses_margins: bool):
        self.uses_margins = uses_margins

    def __get__(self, instance: View | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return EdgesExpression(element=instance, uses_margins=self.uses_margins)

    def __set__(self, instance: View, value: Any) -> None:
        if not isinstance(value, EdgesExpression):
            raise TypeError(f"Expected edges, got {type(value).__name__}")
        compiler = RelationCompiler(instance.config)
        instance.constrain(compiler.compile_edges(instance, value, self.uses_margins))


class _CenterAccessor:
    def __get__(self, instance: View | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return CenterExpression(element=instance)

    def __set__(self, instance: View, value: Any) -> None:
        if not isinstance(value, CenterExpression):
            raise TypeError(f"Expected a center, got {type(value).__name__}")
        instance.constrain(RelationCompiler(instance.config).compile_center(instance, value))


class _RatioAccessor:
    def __get__(self, instance: View | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return RatioExpression(element=instance)

    def __set__(self, instance: View, value: Any) -> None:
        if isinstance(value, tuple):
            value = ratio(*value)
        relationship = RatioExpression(element=instance).equal_to(value)
        instance.constrain(RelationCompiler(instance.config).compile(relationship))


class View:
    """
    A node of a view tree holding the constraints registered on it.

    Example:
        >>> root = View("root")
        >>> card = View("card", parent=root)
        >>> card.edges = root.margins + 20
        >>> card.height = card.width * 0.5 @ 750
        >>> len(root.constraints)
        4
    """

    top = _AttributeAccessor(Attribute.TOP)
    top_margin = _AttributeAccessor(Attribute.TOP_MARGIN)
    left = _AttributeAccessor(Attribute.LEFT)
    left_margin = _AttributeAccessor(Attribute.LEFT_MARGIN)
    right = _AttributeAccessor(Attribute.RIGHT)
    right_margin = _AttributeAccessor(Attribute.RIGHT_MARGIN)
    bottom = _AttributeAccessor(Attribute.BOTTOM)
    bottom_margin = _AttributeAccessor(Attribute.BOTTOM_MARGIN)
    center_x = _AttributeAccessor(Attribute.CENTER_X)
    center_y = _AttributeAccessor(Attribute.CENTER_Y)
    width = _LengthAccessor(Attribute.WIDTH)
    height = _LengthAccessor(Attribute.HEIGHT)

    edges = _EdgesAccessor(uses_margins=False)
    margins = _EdgesAccessor(uses_margins=True)
    middle = _CenterAccessor()
    ratio = _RatioAccessor()

    def __init__(
        self,
        name: str | None = None,
        parent: View | None = None,
        layout_margins: Insets | None = None,
        sink: ConstraintSink | None = None,
        config: LayoutConfig | None = None,
    ):
        self.name = name
        self.config = config or DEFAULT_CONFIG
        self.sink = sink
        self.layout_margins = layout_margins or Insets.uniform(self.config.default_margin)
        self.children: list[View] = []
        self.constraints: list[ConstraintRecord] = []
        self._parent: View | None = None
        self._compression = {
            axis: self.config.default_compression_resistance for axis in Axis
        }
        self._expansion = {axis: self.config.default_expansion_resistance for axis in Axis}

        if parent is not None:
            parent.add_subview(self)

    @property
    def parent(self) -> View | None:
        return self._parent

    @property
    def x(self) -> LayoutAxis:
        """The horizontal axis."""
        return LayoutAxis(self, Axis.HORIZONTAL)

    @property
    def y(self) -> LayoutAxis:
        """The vertical axis."""
        return LayoutAxis(self, Axis.VERTICAL)

    def add_subview(self, child: View) -> View:
        if any(view is child for view in ancestors(self)):
            raise ValueError(f"Adding {child!r} to {self!r} would create a cycle")
        if child.parent is not None:
            child.remove_from_parent()
        self.children.append(child)
        child._parent = self
        return child

    def remove_from_parent(self) -> None:
        """
        Detach from the parent.

        Constraints held by former ancestors that involve this subtree are
        dropped, as they can no longer be satisfied across trees.
        """
        parent = self._parent
        if parent is None:
            return

        subtree = {id(view) for view in self.walk()}
        for ancestor in ancestors(parent):
            ancestor.constraints = [
                record
                for record in ancestor.constraints
                if id(record.subject) not in subtree and id(record.object) not in subtree
            ]

        parent.children.remove(self)
        self._parent = None

    def walk(self):
        """Yield this view and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def constrain(self, pending: Iterable[PendingConstraint]) -> list[PendingConstraint]:
        """Submit compiled constraints to this view's sink."""
        return submit(pending, self.sink)

    def add_constraint(self, record: ConstraintRecord) -> None:
        self.constraints.append(record)

    def remove_constraint(self, record: ConstraintRecord) -> None:
        self.constraints.remove(record)

    def set_compression_resistance(self, axis: Axis, priority: float) -> None:
        self._compression[axis] = self.config.check_priority(
            priority, "compression resistance"
        )

    def set_expansion_resistance(self, axis: Axis, priority: float) -> None:
        self._expansion[axis] = self.config.check_priority(priority, "expansion resistance")

    def compression_resistance(self, axis: Axis) -> float:
        return self._compression[axis]

    def expansion_resistance(self, axis: Axis) -> float:
        return self._expansion[axis]

    def __repr__(self) -> str:
        return f"View({self.name!r})" if self.name else f"View(at {id(self):#x})"


ACCESSORS: dict[Attribute, str] = {
    accessor.attribute: name
    for name, accessor in vars(View).items()
    if isinstance(accessor, _AttributeAccessor)
}
"""Accessor name on ``View`` for every attribute that has one."""
