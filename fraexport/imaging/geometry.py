"""
Data types for sheet-space geometry.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Integer pixel offset."""
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle (x, y = top left)."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: 'Rect') -> bool:
        """Check if this rectangle overlaps another (touching edges do not count)."""
        return not (self.right <= other.x or other.right <= self.x or
                    self.bottom <= other.y or other.bottom <= self.y)

    def contains_rect(self, other: 'Rect') -> bool:
        """Check if other lies fully inside this rectangle."""
        return (self.x <= other.x and self.y <= other.y and
                other.right <= self.right and other.bottom <= self.bottom)

    def to_list(self):
        """Flat [x, y, w, h] form used by spritesheet frame tables."""
        return [int(self.x), int(self.y), int(self.width), int(self.height)]
