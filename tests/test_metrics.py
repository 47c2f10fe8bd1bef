"""Tests for evaluating records against frames."""

import numpy as np
import pytest

from tether.bridge.sinks import RecordingSink
from tether.core.types import Attribute, Insets, Relation
from tether.elements.view import View
from tether.utils.metrics import (
    Frame,
    constraint_summary,
    constraint_violations,
    record_residuals,
)


def card_layout():
    """Card inset by 20 from the root margins, at most 300 wide."""
    sink = RecordingSink()
    root = View("root", sink=sink)
    card = View("card", parent=root, sink=sink)
    card.edges = root.margins + 20
    card.width.within(100, 300, sink=sink)
    card.height = (card.width * 0.5) @ 250
    return root, card, sink.records


class TestFrame:
    """Test attribute resolution."""

    def test_values(self):
        """Test every attribute of a frame."""
        frame = Frame(10, 20, 100, 50, margins=Insets(1, 2, 3, 4))
        assert frame.value(Attribute.LEFT) == 10
        assert frame.value(Attribute.LEFT_MARGIN) == 12
        assert frame.value(Attribute.RIGHT) == 110
        assert frame.value(Attribute.RIGHT_MARGIN) == 106
        assert frame.value(Attribute.TOP_MARGIN) == 21
        assert frame.value(Attribute.BOTTOM) == 70
        assert frame.value(Attribute.BOTTOM_MARGIN) == 67
        assert frame.value(Attribute.CENTER_X) == 60
        assert frame.value(Attribute.CENTER_Y) == 45
        assert frame.value(Attribute.NOT_AN_ATTRIBUTE) == 0


class TestViolations:
    """Test residuals and violation reports."""

    def test_conflicting_frames(self):
        """Test a frame whose height breaks the bottom edge."""
        root, card, records = card_layout()
        frames = {
            root: Frame(0, 0, 348, 400, margins=Insets.uniform(8)),
            card: Frame(28, 28, 292, 146),
        }
        report = constraint_violations(records, frames)

        # height follows the ratio, the bottom edge wants 344
        assert report["violated_indices"] == [3]
        assert report["required_violations"] == 1
        assert report["total_violations"] == 1
        assert report["residuals"][3] == pytest.approx(-198)

    def test_residual_signs(self):
        """Test residuals follow lhs - (multiplier * rhs + constant)."""
        _, card, records = card_layout()
        upper = [r for r in records if r.relation is Relation.LESS_OR_EQUAL]
        residuals = record_residuals(upper, {card: Frame(width=320)})
        np.testing.assert_allclose(residuals, [20.0])

    def test_empty(self):
        """Test no records."""
        assert record_residuals([], {}).shape == (0,)
        assert constraint_violations([], {})["violation_rate"] == 0.0

    def test_missing_frame(self):
        """Test a record referring to an unknown element."""
        _, _, records = card_layout()
        with pytest.raises(KeyError, match="No frame"):
            record_residuals(records, {})


class TestSummary:
    """Test batch summaries."""

    def test_summary(self):
        """Test counts and priority statistics."""
        _, _, records = card_layout()
        summary = constraint_summary(records)
        assert summary["total"] == 7
        assert summary["by_relation"] == {"==": 5, ">=": 1, "<=": 1}
        assert summary["by_attribute"]["height"] == 1
        assert summary["priority_min"] == 250
        assert summary["priority_max"] == 1000
        assert summary["required_fraction"] == pytest.approx(6 / 7)

    def test_empty_summary(self):
        """Test no records."""
        assert constraint_summary([])["total"] == 0
