"""Computable values: an input that is either a plain value or a live cell.

A computable is one of:
- a plain value (number, string, ``Decimal``, ``Fraction``, mpmath number),
- a :class:`Ref`, a mutable cell read through ``.value``,
- a zero-argument callable returning the current value.
"""

from __future__ import annotations

from typing import Any, Callable, Union


class Ref:
    """A mutable cell holding the current value of something external."""

    __slots__ = ("value",)

    def __init__(self, value: Any = 0):
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


Computable = Union[Any, Ref, Callable[[], Any]]


def unref(source: Computable) -> Any:
    """Read the current value of a computable."""
    if isinstance(source, Ref):
        return source.value
    if callable(source):
        return source()
    return source
