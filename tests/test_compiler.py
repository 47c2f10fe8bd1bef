"""Tests for relation compilation and submission."""

import logging

import pytest

from tether.bridge.compiler import (
    PendingConstraint,
    RelationCompiler,
    activate,
    compile_center,
    compile_edges,
    compile_ratio,
    compile_relationship,
    submit,
)
from tether.bridge.sinks import RecordingSink
from tether.core.expressions import Relationship
from tether.core.operators import as_range, literal
from tether.core.types import (
    Attribute,
    ConstraintRecord,
    DisjointHierarchy,
    InvalidPriority,
    LayoutConfig,
    Offset,
    Priority,
    Relation,
    UnderspecifiedConstraint,
)
from tether.elements.view import View


def make_tree():
    """root > parent > (child, sibling)"""
    root = View("root")
    parent = View("parent", parent=root)
    child = View("child", parent=parent)
    sibling = View("sibling", parent=parent)
    return root, parent, child, sibling


class TestLinearCompilation:
    """Test compilation of single relationships."""

    def test_position_relation(self):
        """Test a position equality between siblings."""
        _, parent, child, sibling = make_tree()
        [pending] = compile_relationship(child.left.equal_to(sibling.right + 8))

        assert pending.anchor is parent
        assert pending.record == ConstraintRecord(
            subject=child,
            subject_attribute=Attribute.LEFT,
            relation=Relation.EQUAL,
            object=sibling,
            object_attribute=Attribute.RIGHT,
            multiplier=1.0,
            constant=8.0,
            priority=Priority.REQUIRED,
        )

    def test_literal_object(self):
        """Test a length against a bare number."""
        _, _, child, _ = make_tree()
        [pending] = compile_relationship(child.width <= 120)

        assert pending.anchor is child
        assert pending.record.object is None
        assert pending.record.object_attribute is Attribute.NOT_AN_ATTRIBUTE
        assert pending.record.constant == 120
        assert pending.record.relation is Relation.LESS_OR_EQUAL

    def test_literal_subject_swaps_and_mirrors(self):
        """Test that a literal on the left moves to the object side."""
        _, _, child, _ = make_tree()
        [pending] = compile_relationship(
            Relationship(literal(50), child.width, Relation.LESS_OR_EQUAL)
        )

        record = pending.record
        assert record.subject is child
        assert record.subject_attribute is Attribute.WIDTH
        assert record.relation is Relation.GREATER_OR_EQUAL
        assert record.object is None
        assert record.constant == 50
        assert pending.anchor is child

    def test_two_literals_rejected(self):
        """Test that a relation needs an element."""
        with pytest.raises(UnderspecifiedConstraint):
            compile_relationship(literal(5).equal_to(literal(10)))

    def test_disjoint_trees_rejected(self):
        """Test that elements from different trees cannot be related."""
        a, b = View("a"), View("b")
        with pytest.raises(DisjointHierarchy):
            compile_relationship(a.width.equal_to(b.width))

    def test_scale_and_offset_on_object(self):
        """Test multiplier and constant come from the object side."""
        root, parent, child, _ = make_tree()
        [pending] = compile_relationship(child.height.equal_to(parent.height * 0.5 - 4))
        assert pending.record.multiplier == 0.5
        assert pending.record.constant == -4
        assert pending.anchor is parent

    def test_anchor_for_ancestor(self):
        """Test that relating to an ancestor anchors on the ancestor."""
        root, _, child, _ = make_tree()
        [pending] = compile_relationship(child.top >= root.top_margin)
        assert pending.anchor is root

    def test_priority_resolution(self):
        """Test object, then subject, then default priority."""
        _, parent, child, _ = make_tree()
        [a] = compile_relationship(child.width.equal_to(parent.width @ 250))
        [b] = compile_relationship((child.width @ 500).equal_to(parent.width))
        [c] = compile_relationship(child.width.equal_to(parent.width))
        assert a.record.priority == 250
        assert b.record.priority == 500
        assert c.record.priority == Priority.REQUIRED

    def test_invalid_priority(self):
        """Test out of range priorities."""
        _, parent, child, _ = make_tree()
        with pytest.raises(InvalidPriority):
            compile_relationship(child.width.equal_to(parent.width @ 0))
        with pytest.raises(InvalidPriority):
            compile_relationship(child.width.equal_to(parent.width @ 1001))

    def test_custom_default_priority(self):
        """Test the configured default priority."""
        _, parent, child, _ = make_tree()
        compiler = RelationCompiler(LayoutConfig(default_priority=Priority.DEFAULT_HIGH))
        [pending] = compiler.compile(child.width.equal_to(parent.width))
        assert pending.record.priority == Priority.DEFAULT_HIGH

    def test_subject_transform_warns(self, caplog):
        """Test that a subject-side offset is reported."""
        _, parent, child, _ = make_tree()
        with caplog.at_level(logging.WARNING, logger="tether.bridge.compiler"):
            [pending] = compile_relationship((child.width + 10).equal_to(parent.width))
        assert "Ignoring offset" in caplog.text
        assert pending.record.constant == 0

    def test_mixed_kinds_rejected(self):
        """Test relationships built by hand with mismatched kinds."""
        _, _, child, _ = make_tree()
        with pytest.raises(TypeError):
            compile_relationship(Relationship(child.left, child.width))

    def test_range(self):
        """Test both bounds of a range."""
        _, _, child, _ = make_tree()
        compiler = RelationCompiler()
        low, high = compiler.compile_all(as_range(child.width, 120, 50))

        assert low.record.relation is Relation.GREATER_OR_EQUAL
        assert low.record.constant == 50
        assert high.record.relation is Relation.LESS_OR_EQUAL
        assert high.record.constant == 120
        assert compiler.compile_all(as_range(child.width, 50, 120)) == [low, high]


class TestGroupCompilation:
    """Test edges, center and ratio expansion."""

    def test_edges_to_margins(self):
        """Test edges pinned to the parent's margins with an inset."""
        _, parent, child, _ = make_tree()
        pending = compile_edges(child, parent.margins + 20)

        assert len(pending) == 4
        assert all(p.anchor is parent for p in pending)
        assert all(p.record.relation is Relation.EQUAL for p in pending)
        got = {
            p.record.subject_attribute: (p.record.object_attribute, p.record.constant)
            for p in pending
        }
        assert got == {
            Attribute.TOP: (Attribute.TOP_MARGIN, 20),
            Attribute.LEFT: (Attribute.LEFT_MARGIN, 20),
            Attribute.RIGHT: (Attribute.RIGHT_MARGIN, -20),
            Attribute.BOTTOM: (Attribute.BOTTOM_MARGIN, -20),
        }

    def test_edges_raw_with_offset(self):
        """Test raw edges with a per-axis offset."""
        _, parent, child, sibling = make_tree()
        pending = compile_edges(child, sibling.edges - Offset(4, 2))
        got = {p.record.subject_attribute: p.record.constant for p in pending}
        assert got == {
            Attribute.TOP: -2,
            Attribute.LEFT: -4,
            Attribute.RIGHT: 4,
            Attribute.BOTTOM: 2,
        }
        assert all(p.record.object_attribute in (Attribute.TOP, Attribute.LEFT,
                                                 Attribute.RIGHT, Attribute.BOTTOM)
                   for p in pending)
        assert all(p.anchor is parent for p in pending)

    def test_edges_subject_margins(self):
        """Test margin-qualified subject attributes."""
        _, parent, child, _ = make_tree()
        pending = compile_edges(child, parent.edges, subject_margins=True)
        assert {p.record.subject_attribute for p in pending} == {
            Attribute.TOP_MARGIN,
            Attribute.LEFT_MARGIN,
            Attribute.RIGHT_MARGIN,
            Attribute.BOTTOM_MARGIN,
        }

    def test_center(self):
        """Test center alignment with an offset."""
        _, parent, child, sibling = make_tree()
        x, y = compile_center(child, sibling.middle + Offset(5, -3))
        assert (x.record.subject_attribute, x.record.constant) == (Attribute.CENTER_X, 5)
        assert (y.record.subject_attribute, y.record.constant) == (Attribute.CENTER_Y, -3)
        assert x.anchor is parent and y.anchor is parent

    def test_ratio(self):
        """Test a self-referential width/height ratio."""
        _, _, child, _ = make_tree()
        [pending] = compile_ratio(child, 2 / 3)
        record = pending.record
        assert record.subject is child and record.object is child
        assert record.subject_attribute is Attribute.WIDTH
        assert record.object_attribute is Attribute.HEIGHT
        assert record.multiplier == pytest.approx(2 / 3)
        assert record.relation is Relation.EQUAL
        assert pending.anchor is child

    def test_ratio_relation_with_priority(self):
        """Test a bounded ratio with a priority."""
        _, _, child, _ = make_tree()
        [pending] = compile_relationship(child.ratio <= child.ratio * 2 @ 300)
        assert pending.record.relation is Relation.LESS_OR_EQUAL
        assert pending.record.multiplier == 2
        assert pending.record.priority == 300


class TestSubmission:
    """Test registration of compiled constraints."""

    def test_submit_to_recording_sink(self):
        """Test that an empty recording sink is used as given."""
        _, parent, child, _ = make_tree()
        sink = RecordingSink()
        pending = compile_relationship(child.width.equal_to(parent.width))
        submitted = submit(pending, sink)

        assert submitted == pending
        assert sink.records_on(parent) == [pending[0].record]
        assert parent.constraints == []

    def test_submit_to_hierarchy(self):
        """Test default registration on the anchor element."""
        _, parent, child, _ = make_tree()
        submit(compile_relationship(child.width.equal_to(parent.width)))
        assert len(parent.constraints) == 1
        assert child.constraints == []

    def test_activate(self):
        """Test compile and submit in one call."""
        _, parent, child, _ = make_tree()
        sink = RecordingSink()
        result = activate(child.width <= parent.width, 44 <= child.height, sink=sink)
        assert len(sink) == 2
        assert all(isinstance(p, PendingConstraint) for p in result)

    def test_activate_is_all_or_nothing(self):
        """Test that a failing relationship registers nothing."""
        _, parent, child, _ = make_tree()
        stranger = View("stranger")
        sink = RecordingSink()
        with pytest.raises(DisjointHierarchy):
            activate(child.width <= parent.width, child.width.equal_to(stranger.width), sink=sink)
        assert len(sink) == 0

    def test_within(self):
        """Test immediate range activation."""
        _, _, child, _ = make_tree()
        sink = RecordingSink()
        child.width.within(120, 50, sink=sink)
        assert [(r.relation, r.constant) for r in sink.records] == [
            (Relation.GREATER_OR_EQUAL, 50),
            (Relation.LESS_OR_EQUAL, 120),
        ]

    def test_record_str(self):
        """Test human readable records."""
        _, parent, child, _ = make_tree()
        [pending] = compile_relationship(child.left.equal_to((parent.left_margin + 20) @ 751))
        assert str(pending.record) == "child.left == parent.leftMargin + 20 @751"
        [pending] = compile_relationship(child.width <= 100)
        assert str(pending.record) == "child.width <= 100 @1000"
