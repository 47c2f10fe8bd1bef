"""Relation compiler turning expressions into native constraint records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tether.bridge.sinks import ConstraintSink, HierarchySink
from tether.core.expressions import (
    CenterExpression,
    EdgesExpression,
    LinearExpression,
    RatioExpression,
    Relationship,
)
from tether.core.hierarchy import common_ancestor
from tether.core.types import (
    DEFAULT_CONFIG,
    Attribute,
    ConstraintRecord,
    LayoutConfig,
    Relation,
    UnderspecifiedConstraint,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingConstraint:
    """A compiled record together with the element it must be registered on."""

    record: ConstraintRecord
    anchor: Any


class RelationCompiler:
    """
    Compiles relationships and constraint groups into constraint records.

    Compilation is pure: nothing is registered until the result is passed to
    ``submit``. Like the host toolkits it targets, the compiler is meant to be
    driven from a single thread.
    """

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def compile(self, relationship: Relationship) -> list[PendingConstraint]:
        """
        Compile one ``lhs <relation> rhs`` relationship.

        Args:
            relationship: Relationship to compile

        Returns:
            A single pending constraint

        Raises:
            UnderspecifiedConstraint: If neither side carries an element
            DisjointHierarchy: If both elements live in different trees
            TypeError: If both sides are of different kinds
        """
        lhs, rhs, relation = relationship.lhs, relationship.rhs, relationship.relation
        if lhs.kind != rhs.kind:
            raise TypeError(
                f"Cannot relate a {lhs.kind} expression to a {rhs.kind} expression"
            )

        if isinstance(lhs, RatioExpression):
            return [self._compile_ratio(lhs, rhs, relation)]

        if not lhs.has_element and not rhs.has_element:
            raise UnderspecifiedConstraint(
                "Invalid constraint between two literals; at least one side must "
                "refer to an element"
            )

        subject, obj = lhs, rhs
        if not subject.has_element:
            subject, obj, relation = rhs, lhs, relation.mirrored()

        return [self._compile_linear(subject, obj, relation)]

    def compile_all(self, relationships: Iterable[Relationship]) -> list[PendingConstraint]:
        pending: list[PendingConstraint] = []
        for relationship in relationships:
            pending.extend(self.compile(relationship))
        return pending

    def compile_edges(
        self, element: Any, edges: EdgesExpression, subject_margins: bool = False
    ) -> list[PendingConstraint]:
        """
        Pin the four edges of ``element`` to the edges described by ``edges``.

        Right and bottom constants are negated so that positive insets shrink
        the element on every side.
        """
        anchor = common_ancestor(element, edges.element)
        insets = edges.insets
        sides = (
            (Attribute.TOP, insets.top),
            (Attribute.LEFT, insets.left),
            (Attribute.RIGHT, -insets.right),
            (Attribute.BOTTOM, -insets.bottom),
        )

        pending = []
        for attribute, constant in sides:
            record = ConstraintRecord(
                subject=element,
                subject_attribute=attribute.with_margin() if subject_margins else attribute,
                relation=Relation.EQUAL,
                object=edges.element,
                object_attribute=attribute.with_margin() if edges.uses_margins else attribute,
                multiplier=1.0,
                constant=constant,
                priority=self.config.default_priority,
            )
            pending.append(self._emit(record, anchor))
        return pending

    def compile_center(self, element: Any, center: CenterExpression) -> list[PendingConstraint]:
        """Align the center of ``element`` with ``center``, displaced by its offset."""
        anchor = common_ancestor(element, center.element)
        pending = []
        for attribute, constant in (
            (Attribute.CENTER_X, center.offset.horizontal),
            (Attribute.CENTER_Y, center.offset.vertical),
        ):
            record = ConstraintRecord(
                subject=element,
                subject_attribute=attribute,
                relation=Relation.EQUAL,
                object=center.element,
                object_attribute=attribute,
                multiplier=1.0,
                constant=constant,
                priority=self.config.default_priority,
            )
            pending.append(self._emit(record, anchor))
        return pending

    def _compile_linear(
        self, subject: LinearExpression, obj: LinearExpression, relation: Relation
    ) -> PendingConstraint:
        self._warn_ignored_transform(subject)

        if obj.has_element:
            anchor = common_ancestor(subject.element, obj.element)
        else:
            anchor = subject.element

        record = ConstraintRecord(
            subject=subject.element,
            subject_attribute=subject.attribute,
            relation=relation,
            object=obj.element,
            object_attribute=obj.attribute,
            multiplier=obj.multiplier,
            constant=obj.constant,
            priority=self._resolve_priority(subject, obj),
        )
        return self._emit(record, anchor)

    def _compile_ratio(
        self, lhs: RatioExpression, rhs: RatioExpression, relation: Relation
    ) -> PendingConstraint:
        self._warn_ignored_transform(lhs)

        record = ConstraintRecord(
            subject=lhs.element,
            subject_attribute=Attribute.WIDTH,
            relation=relation,
            object=rhs.element,
            object_attribute=Attribute.HEIGHT,
            multiplier=rhs.multiplier,
            constant=rhs.constant,
            priority=self._resolve_priority(lhs, rhs),
        )
        return self._emit(record, common_ancestor(lhs.element, rhs.element))

    def _resolve_priority(self, subject: LinearExpression, obj: LinearExpression) -> float:
        if obj.priority is not None:
            priority = obj.priority
        elif subject.priority is not None:
            priority = subject.priority
        else:
            priority = self.config.default_priority
        return self.config.check_priority(priority)

    def _warn_ignored_transform(self, subject: LinearExpression) -> None:
        if not subject.is_identity:
            logger.warning(
                "Ignoring offset %g and multiplier %g on the subject side of a "
                "constraint on %s; move them to the other side",
                subject.constant,
                subject.multiplier,
                subject.attribute.value,
            )

    def _emit(self, record: ConstraintRecord, anchor: Any) -> PendingConstraint:
        logger.debug("Compiled %s", record)
        return PendingConstraint(record, anchor)


def compile_relationship(
    relationship: Relationship, config: LayoutConfig | None = None
) -> list[PendingConstraint]:
    """Compile a relationship with a throwaway compiler."""
    return RelationCompiler(config).compile(relationship)


def compile_edges(
    element: Any,
    edges: EdgesExpression,
    subject_margins: bool = False,
    config: LayoutConfig | None = None,
) -> list[PendingConstraint]:
    return RelationCompiler(config).compile_edges(element, edges, subject_margins)


def compile_center(
    element: Any, center: CenterExpression, config: LayoutConfig | None = None
) -> list[PendingConstraint]:
    return RelationCompiler(config).compile_center(element, center)


def compile_ratio(
    element: Any, value: float | RatioExpression, config: LayoutConfig | None = None
) -> list[PendingConstraint]:
    """Compile ``element.width == height * value``."""
    relationship = RatioExpression(element=element).equal_to(value)
    return RelationCompiler(config).compile(relationship)


def submit(
    pending: Iterable[PendingConstraint], sink: ConstraintSink | None = None
) -> list[PendingConstraint]:
    """
    Register compiled constraints.

    Args:
        pending: Output of one of the compile functions
        sink: Destination; defaults to registering on the anchor elements

    Returns:
        The submitted constraints
    """
    if sink is None:
        sink = HierarchySink()
    submitted = list(pending)
    for item in submitted:
        sink.register(item.record, item.anchor)
    logger.debug("Submitted %d constraint(s) to %r", len(submitted), sink)
    return submitted


def activate(
    *relationships: Relationship,
    sink: ConstraintSink | None = None,
    config: LayoutConfig | None = None,
) -> list[PendingConstraint]:
    """
    Compile and register relationships.

    Every relationship is compiled before anything is registered, so a
    failure leaves the sink untouched.

    Example:
        >>> activate(label.width <= parent.width - 40, 44 <= button.height)
    """
    pending = RelationCompiler(config).compile_all(relationships)
    return submit(pending, sink)
