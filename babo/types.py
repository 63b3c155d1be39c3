# babo/types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, TypeAlias, Union

Scalar: TypeAlias = float

Color = Tuple[float, float, float]  # r, g, b in [0, 1]


@dataclass(frozen=True, slots=True)
class Vector2:
    """Screen-space pair: a pen position, a sprite size, a zoom factor."""

    x: Scalar
    y: Scalar

    @staticmethod
    def zero() -> Vector2:
        return Vector2(0.0, 0.0)

    def __iter__(self) -> Iterator[Scalar]:
        return iter((self.x, self.y))

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __mul__(self, other: Union[Scalar, Vector2]) -> Vector2:
        # Scalar multiply, or component-wise when scaling by another vector.
        if isinstance(other, Vector2):
            return Vector2(self.x * other.x, self.y * other.y)
        return Vector2(self.x * other, self.y * other)

    __rmul__ = __mul__

    def half(self) -> Vector2:
        return Vector2(self.x / 2.0, self.y / 2.0)


@dataclass(frozen=True, slots=True)
class Vector3:
    """A sprite position; ``z`` only orders sprites, it is not perspective."""

    x: Scalar
    y: Scalar
    z: Scalar = 0.0

    @staticmethod
    def zero() -> Vector3:
        return Vector3(0.0, 0.0, 0.0)

    def __iter__(self) -> Iterator[Scalar]:
        return iter((self.x, self.y, self.z))

    @property
    def xy(self) -> Vector2:
        return Vector2(self.x, self.y)

    def moved(self, delta: Vector2) -> Vector3:
        """Offset in the xy plane, keeping depth."""
        return Vector3(self.x + delta.x, self.y + delta.y, self.z)
