"""
Text content models: glyphs, words and text lines.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .base import LayoutElement, Polygon


@dataclass
class Glyph(LayoutElement):
    """A single character (or grapheme) with its own outline."""
    text: str = ""
    confidence: Optional[float] = None


@dataclass
class Word(LayoutElement):
    """A recognized word composed of glyphs."""
    text: str = ""
    confidence: Optional[float] = None
    glyphs: List[Glyph] = field(default_factory=list)

    def createGlyph(self, coords: Polygon) -> Glyph:
        glyph = Glyph(coords=coords)
        self.glyphs.append(glyph)
        return glyph

    def composeText(self) -> str:
        """Concatenate glyph texts without separators."""
        return "".join(g.text for g in self.glyphs)


@dataclass
class TextLine(LayoutElement):
    """A line of words. Its outline is derived from the words once the line is complete."""
    text: str = ""
    words: List[Word] = field(default_factory=list)

    def createWord(self, coords: Polygon) -> Word:
        word = Word(coords=coords)
        self.words.append(word)
        return word

    def composeText(self) -> str:
        """Concatenate word texts; words carry their own trailing punctuation."""
        return "".join(w.text for w in self.words)
