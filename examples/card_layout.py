#!/usr/bin/env python3
"""
Card Layout Example

Builds a small view tree, constrains it with the expression operators and
checks a candidate set of frames against the compiled records.
"""

import logging

from tether import Insets, RecordingSink, View, activate, as_range, literal
from tether.utils.metrics import Frame, constraint_summary, constraint_violations


def build_layout(sink: RecordingSink) -> tuple[View, View, View]:
    """Root with a card and a title label inside the card."""
    root = View("root", sink=sink)
    card = View("card", parent=root, sink=sink)
    title = View("title", parent=card, sink=sink)

    card.edges = root.margins + 20
    title.top = card.top_margin
    title.left = card.left_margin
    title.right = card.right_margin
    title.height = literal(44) @ 750
    activate(*as_range(title.width, 80, 400), sink=sink)
    title.x.resist_compression(249)

    return root, card, title


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    sink = RecordingSink()
    root, card, title = build_layout(sink)

    print("Compiled constraints:")
    for record, anchor in sink.registrations:
        print(f"  on {anchor.name:<6} {record}")

    frames = {
        root: Frame(0, 0, 375, 667, margins=Insets.uniform(8)),
        card: Frame(28, 28, 319, 611, margins=Insets.uniform(8)),
        title: Frame(36, 36, 303, 44),
    }
    report = constraint_violations(sink.records, frames)
    summary = constraint_summary(sink.records)

    print(f"\n{summary['total']} constraints, {report['total_violations']} violated")
    for index in report["violated_indices"]:
        print(f"  {sink.records[index]} (residual {report['residuals'][index]:+.1f})")


if __name__ == "__main__":
    main()
