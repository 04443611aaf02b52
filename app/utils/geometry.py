"""
Conversion of Cloud Vision bounding shapes to PAGE polygons.
"""
import struct
from typing import Optional

from app.models import Polygon, Rect


def scale_normalized(value: float, size: int) -> int:
    """
    Scale a normalized coordinate to pixels, truncating toward zero.

    The product is rounded to single precision before truncation, so 0.7
    (0.69999998... as float32) on a 100 px page gives 70.
    """
    return int(struct.unpack("f", struct.pack("f", value * size))[0])


def convert_bounding_poly(bounding_poly, width: int, height: int) -> Polygon:
    """
    Convert a Vision ``BoundingPoly`` to an absolute-pixel polygon.

    Absolute vertices win over normalized ones. Normalized vertices are
    scaled by the page size and truncated toward zero. Every coordinate is
    clamped to be non-negative: the service reports slightly negative
    values for text touching the image border.

    Args:
        bounding_poly: Object with ``vertices`` and/or ``normalized_vertices``
            (a missing shape yields an empty polygon)
        width: Page width in pixels (scaling basis for normalized vertices)
        height: Page height in pixels

    Returns:
        Polygon, possibly empty
    """
    polygon = Polygon()
    if bounding_poly is None:
        return polygon

    vertices = list(bounding_poly.vertices)
    if vertices:
        for vertex in vertices:
            polygon.addPoint(max(0, int(vertex.x)), max(0, int(vertex.y)))
        return polygon

    for vertex in bounding_poly.normalized_vertices:
        polygon.addPoint(max(0, scale_normalized(vertex.x, width)), max(0, scale_normalized(vertex.y, height)))
    return polygon


def line_polygon_from_words(words) -> Optional[Polygon]:
    """
    Outline for a completed text line.

    A single word lends the line an independent copy of its own outline;
    several words are enclosed by their common bounding rectangle.
    """
    if not words:
        return None
    if len(words) == 1:
        return words[0].coords.clone()

    boxes = [w.coords.getBoundingBox() for w in words]
    return Polygon.fromRect(Rect(
        left=min(b.left for b in boxes),
        top=min(b.top for b in boxes),
        right=max(b.right for b in boxes),
        bottom=max(b.bottom for b in boxes),
    ))
