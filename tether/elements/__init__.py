"""Concrete elements exposing attribute accessors."""

from tether.elements.view import View

__all__ = ["View"]
