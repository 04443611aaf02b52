# Models package - Data structures for PAGE layout documents
from .base import Rect, Polygon, LayoutElement
from .text import Glyph, Word, TextLine
from .document import RegionType, Region, TextRegion, Document

__all__ = [
    'Rect', 'Polygon', 'LayoutElement',
    'Glyph', 'Word', 'TextLine',
    'RegionType', 'Region', 'TextRegion', 'Document'
]
