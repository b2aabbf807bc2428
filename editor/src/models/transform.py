"""Geometry data structures for positions, sizes and bounding boxes."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """2D vector for coordinate pairs.

    Used for absolute device-pixel positions and for offsets between them.
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def offset(self, dx: float, dy: float) -> 'Vec2':
        """Return a copy translated by (dx, dy)"""
        return Vec2(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Size:
    """Width/height pair in pixels."""
    width: float
    height: float

    def __iter__(self):
        """Allow tuple unpacking: w, h = size"""
        return iter((self.width, self.height))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box.

    min_x/min_y is the top-left corner, max_x/max_y the bottom-right corner.
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def origin(self) -> Vec2:
        return Vec2(self.min_x, self.min_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)
