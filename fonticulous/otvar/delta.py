"""
Delta values carried by tuple variations.

A delta is either one-dimensional (cvar, one value per CVT entry) or
two-dimensional (gvar, one x/y offset per outline point).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from fonticulous.otvar.errors import InvalidDimensionalityError


class Delta(ABC):
    """Base class of the scalar and vector delta variants."""

    dimensions: ClassVar[int]

    def get_scalar(self) -> int:
        raise InvalidDimensionalityError(
            "Tried to turn a coordinate delta into a scalar delta"
        )

    def get_2d(self) -> tuple[int, int]:
        raise InvalidDimensionalityError(
            "Tried to turn a scalar delta into a coordinate delta"
        )

    @abstractmethod
    def components(self) -> tuple[int, ...]:
        """The delta as a tuple of its axis values."""

    @property
    def is_zero(self) -> bool:
        return not any(self.components())


@dataclass(frozen=True)
class ScalarDelta(Delta):
    """One-dimensional delta (cvar)."""

    value: int
    dimensions: ClassVar[int] = 1

    def get_scalar(self) -> int:
        return self.value

    def components(self) -> tuple[int, ...]:
        return (self.value,)


@dataclass(frozen=True)
class VectorDelta(Delta):
    """Two-dimensional delta (gvar)."""

    x: int
    y: int
    dimensions: ClassVar[int] = 2

    def get_2d(self) -> tuple[int, int]:
        return (self.x, self.y)

    def components(self) -> tuple[int, ...]:
        return (self.x, self.y)


def deltas_dimensions(deltas) -> int | None:
    """
    Return the shared dimensionality of a delta sequence.

    Args:
        deltas: Sequence of Delta values

    Returns:
        1 or 2, or None for an empty sequence

    Raises:
        InvalidDimensionalityError: If scalar and vector deltas are mixed
    """
    kinds = {type(d) for d in deltas}
    if not kinds:
        return None
    if len(kinds) > 1:
        raise InvalidDimensionalityError(
            "Scalar and vector deltas cannot be mixed in one variation"
        )
    kind = kinds.pop()
    if not issubclass(kind, Delta):
        raise InvalidDimensionalityError(f"{kind.__name__} is not a Delta")
    return kind.dimensions


def split_components(deltas, dimensions: int) -> list[int]:
    """
    Flatten deltas into the order they are packed in.

    All x (or scalar) values come first, then all y values.
    """
    if dimensions == 1:
        return [d.get_scalar() for d in deltas]
    points = [d.get_2d() for d in deltas]
    return [x for x, _ in points] + [y for _, y in points]


def join_components(values, dimensions: int) -> list[Delta]:
    """Inverse of split_components."""
    if dimensions == 1:
        return [ScalarDelta(v) for v in values]
    if dimensions != 2:
        raise InvalidDimensionalityError(f"Unsupported dimensionality {dimensions}")
    half = len(values) // 2
    return [VectorDelta(x, y) for x, y in zip(values[:half], values[half:])]
