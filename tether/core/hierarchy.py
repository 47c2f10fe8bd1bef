"""Element protocol and nearest-common-ancestor resolution."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from tether.core.types import Axis, ConstraintRecord, DisjointHierarchy


@runtime_checkable
class Element(Protocol):
    """A node of a containment tree that can hold constraints."""

    @property
    def parent(self) -> Element | None:
        """Containing element, or None for a root."""
        ...

    def add_constraint(self, record: ConstraintRecord) -> None:
        """Register a record on this element."""
        ...

    def set_compression_resistance(self, axis: Axis, priority: float) -> None: ...

    def set_expansion_resistance(self, axis: Axis, priority: float) -> None: ...


def ancestors(element: Any) -> list[Any]:
    """Chain of containing elements from ``element`` up to its root, inclusive."""
    chain = [element]
    current = element.parent
    while current is not None:
        chain.append(current)
        current = current.parent
    return chain


def common_ancestor(a: Any, b: Any) -> Any:
    """
    Find the nearest element containing both ``a`` and ``b``.

    An element counts as containing itself, so the result may be ``a`` or
    ``b``. The chain of ``b`` is scanned from the leaf, which makes the first
    hit the nearest one.

    Raises:
        DisjointHierarchy: If the elements belong to different trees
    """
    if a is b:
        return a

    chain = {id(element) for element in ancestors(a)}
    for candidate in ancestors(b):
        if id(candidate) in chain:
            return candidate

    raise DisjointHierarchy(
        f"{a!r} and {b!r} must descend from a common ancestor to be constrained together"
    )
