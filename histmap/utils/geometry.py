"""Axis-aligned screen rectangles for culling and label collision tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """A screen-space rectangle given by its edges (y grows downward)."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "Rect":
        """Rectangle anchored at the origin, e.g. a whole canvas."""
        return cls(0.0, 0.0, float(width), float(height))

    @classmethod
    def around(cls, x: float, y: float, half_size: float) -> "Rect":
        """Square of side ``2 * half_size`` centred on ``(x, y)``."""
        return cls(x - half_size, y - half_size, x + half_size, y + half_size)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.left >= self.right or self.top >= self.bottom

    def intersects(self, other: "Rect") -> bool:
        """Open-interval overlap test.

        Rectangles that only share an edge do not intersect, and an empty
        rectangle intersects nothing.

        Returns:
            True if the interiors of the two rectangles overlap.
        """
        if self.is_empty or other.is_empty:
            return False
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def contains(self, other: "Rect") -> bool:
        """Check that *other* lies fully inside this rectangle.

        Edges may touch. An empty container contains nothing.
        """
        if self.is_empty:
            return False
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )

    def intersects_any(self, others: list["Rect"]) -> bool:
        return any(self.intersects(rect) for rect in others)

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Return as ``(left, top, right, bottom)`` for PIL drawing calls."""
        return (self.left, self.top, self.right, self.bottom)
