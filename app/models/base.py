"""
Base geometry classes for PAGE layout documents.
"""
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class Rect:
    """Axis-aligned rectangle in absolute pixel coordinates."""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


@dataclass
class Polygon:
    """Ordered outline of integer (x, y) points."""
    points: List[Tuple[int, int]] = field(default_factory=list)

    def addPoint(self, x: int, y: int):
        """Append a point to the outline."""
        self.points.append((int(x), int(y)))

    def getSize(self) -> int:
        """Number of points in the outline."""
        return len(self.points)

    def isDegenerate(self) -> bool:
        """Outlines with two points or fewer enclose no area and are never attached."""
        return len(self.points) <= 2

    def getBoundingBox(self) -> Rect:
        """Get the smallest axis-aligned rectangle containing all points."""
        if not self.points:
            return Rect(0, 0, 0, 0)
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return Rect(min(xs), min(ys), max(xs), max(ys))

    def clone(self) -> 'Polygon':
        """Independent copy; editing the copy never touches this outline."""
        return Polygon(points=list(self.points))

    @classmethod
    def fromRect(cls, rect: Rect) -> 'Polygon':
        """Build a 4-point outline: top-left, top-right, bottom-right, bottom-left."""
        return cls(points=[
            (rect.left, rect.top),
            (rect.right, rect.top),
            (rect.right, rect.bottom),
            (rect.left, rect.bottom),
        ])

    def toPointsString(self) -> str:
        """PAGE XML points attribute, e.g. '0,0 10,0 10,5'."""
        return " ".join(f"{x},{y}" for x, y in self.points)


@dataclass
class LayoutElement:
    """Base class for all elements that carry an outline."""
    coords: Polygon = field(default_factory=Polygon)
