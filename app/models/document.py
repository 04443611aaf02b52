"""
Region and Document models for PAGE layout output.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from .base import LayoutElement, Polygon
from .text import TextLine


class RegionType(str, Enum):
    """Region kinds, valued by their PAGE XML element names."""
    TEXT = "TextRegion"
    IMAGE = "ImageRegion"
    TABLE = "TableRegion"
    SEPARATOR = "SeparatorRegion"
    GRAPHIC = "GraphicRegion"
    UNKNOWN = "UnknownRegion"


@dataclass
class Region(LayoutElement):
    """A classified area of the page."""
    regionType: RegionType = RegionType.UNKNOWN
    custom: Optional[str] = None


@dataclass
class TextRegion(Region):
    """Text area holding lines in reading order."""
    regionType: RegionType = RegionType.TEXT
    text: str = ""
    textLines: List[TextLine] = field(default_factory=list)

    def createTextLine(self) -> TextLine:
        line = TextLine()
        self.textLines.append(line)
        return line

    def composeText(self) -> str:
        """One line of text per text line, no separator after the last one."""
        return "\n".join(line.text for line in self.textLines)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class Document:
    """A single PAGE document: one image and its layout."""
    width: int = 0
    height: int = 0
    imageFilename: str = ""
    regions: List[Region] = field(default_factory=list)
    creator: str = ""
    created: datetime = field(default_factory=_utc_now)
    lastChange: datetime = field(default_factory=_utc_now)

    def setSize(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)

    def createRegion(self, regionType: RegionType, coords: Polygon) -> Region:
        """Create and append a region of the given kind."""
        if regionType == RegionType.TEXT:
            region = TextRegion(coords=coords)
        else:
            region = Region(coords=coords, regionType=regionType)
        self.regions.append(region)
        return region

    @property
    def textRegions(self) -> List[TextRegion]:
        return [r for r in self.regions if isinstance(r, TextRegion)]
