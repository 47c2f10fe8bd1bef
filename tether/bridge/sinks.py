"""Destinations for compiled constraints and content priorities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from tether.core.types import Axis, ConstraintRecord


@runtime_checkable
class ConstraintSink(Protocol):
    """Receiver of compiled records, typically the external solver."""

    def register(self, record: ConstraintRecord, onto: Any) -> None:
        """Register ``record`` on the anchor element ``onto``."""
        ...


@runtime_checkable
class AxisPrioritySink(Protocol):
    """Receiver of per-axis content priorities."""

    def set_compression_resistance(self, element: Any, axis: Axis, priority: float) -> None: ...

    def set_expansion_resistance(self, element: Any, axis: Axis, priority: float) -> None: ...


class HierarchySink:
    """Forward everything to the elements themselves."""

    def register(self, record: ConstraintRecord, onto: Any) -> None:
        onto.add_constraint(record)

    def set_compression_resistance(self, element: Any, axis: Axis, priority: float) -> None:
        element.set_compression_resistance(axis, priority)

    def set_expansion_resistance(self, element: Any, axis: Axis, priority: float) -> None:
        element.set_expansion_resistance(axis, priority)

    def __repr__(self) -> str:
        return "HierarchySink()"


@dataclass
class RecordingSink:
    """
    In-memory sink keeping everything it receives, in order.

    Useful for dry runs and tests where no live element tree should be touched.
    """

    registrations: list[tuple[ConstraintRecord, Any]] = field(default_factory=list)
    compression: dict[tuple[Any, Axis], float] = field(default_factory=dict)
    expansion: dict[tuple[Any, Axis], float] = field(default_factory=dict)

    def register(self, record: ConstraintRecord, onto: Any) -> None:
        self.registrations.append((record, onto))

    def set_compression_resistance(self, element: Any, axis: Axis, priority: float) -> None:
        self.compression[(element, axis)] = priority

    def set_expansion_resistance(self, element: Any, axis: Axis, priority: float) -> None:
        self.expansion[(element, axis)] = priority

    @property
    def records(self) -> list[ConstraintRecord]:
        return [record for record, _ in self.registrations]

    def records_on(self, anchor: Any) -> list[ConstraintRecord]:
        """Records registered on one anchor element."""
        return [record for record, onto in self.registrations if onto is anchor]

    def clear(self) -> None:
        self.registrations.clear()
        self.compression.clear()
        self.expansion.clear()

    def __len__(self) -> int:
        return len(self.registrations)
