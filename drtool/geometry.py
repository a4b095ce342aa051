"""Integer points, sizes and rectangles in a y-up coordinate system."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Point:
    """A point on screen."""

    x: int
    y: int

    def translated(self, x_offset: int, y_offset: int) -> "Point":
        """Return a copy of this point moved by the given offsets."""
        return Point(self.x + x_offset, self.y + y_offset)


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: int
    height: int


@dataclass
class Rect:
    """A rectangle whose ``top`` lies above its ``bottom`` (y grows upward)."""

    left: float = 0
    top: float = 0
    right: float = 0
    bottom: float = 0

    def overlaps(self, other: "Rect") -> bool:
        """True if the two rectangles share at least one point, edges included."""
        return not (
            other.right < self.left
            or other.left > self.right
            or other.top < self.bottom
            or other.bottom > self.top
        )

    def contains(self, pt: Point) -> bool:
        """True if the point lies inside the rectangle or on its edge."""
        return self.left <= pt.x <= self.right and self.bottom <= pt.y <= self.top

    def translate(self, x: float, y: float) -> None:
        """Move this rectangle in place."""
        self.left += x
        self.right += x
        self.top += y
        self.bottom += y

    def translated(self, x: float, y: float) -> "Rect":
        """Return a moved copy, leaving this rectangle unchanged."""
        moved = replace(self)
        moved.translate(x, y)
        return moved

    def size(self) -> Size:
        return Size(self.width(), self.height())

    def width(self) -> float:
        return self.right - self.left

    def height(self) -> float:
        return self.top - self.bottom

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """The overlapping region, or None when the rectangles do not overlap."""
        if not self.overlaps(other):
            return None
        return Rect(
            left=max(self.left, other.left),
            top=min(self.top, other.top),
            right=min(self.right, other.right),
            bottom=max(self.bottom, other.bottom),
        )