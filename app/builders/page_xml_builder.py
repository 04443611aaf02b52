"""
PAGE XML builder for layout documents.
"""
import uuid
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Optional

from api.core import get_logger
from app.models import Document, Glyph, Polygon, Region, TextLine, TextRegion, Word
from config import PAGE_XML_NAMESPACE, PAGE_XML_SCHEMA_LOCATION

logger = get_logger("vision2page.page_xml")

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%S")


class PageXmlBuilder:
    """Serializes a Document to PAGE XML (2019-07-15 schema)."""

    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    def build(self, document: Document, path: str):
        """Write the document to ``path`` as UTF-8 PAGE XML."""
        tree = ET.ElementTree(self.to_element(document))
        if self.pretty:
            ET.indent(tree, space="  ")
        tree.write(path, encoding="utf-8", xml_declaration=True)
        logger.debug(f"PAGE XML saved: {path}", extra={"extra_data": {"regions": len(document.regions)}})

    def to_string(self, document: Document) -> str:
        element = self.to_element(document)
        if self.pretty:
            ET.indent(element, space="  ")
        return ET.tostring(element, encoding="unicode", xml_declaration=True)

    def to_element(self, document: Document) -> ET.Element:
        ET.register_namespace("", PAGE_XML_NAMESPACE)
        ET.register_namespace("xsi", XSI_NAMESPACE)

        root = ET.Element(self._tag("PcGts"), {
            f"{{{XSI_NAMESPACE}}}schemaLocation": PAGE_XML_SCHEMA_LOCATION,
            "pcGtsId": f"pc-{uuid.uuid4()}",
        })

        metadata = ET.SubElement(root, self._tag("Metadata"))
        ET.SubElement(metadata, self._tag("Creator")).text = document.creator
        ET.SubElement(metadata, self._tag("Created")).text = _format_timestamp(document.created)
        ET.SubElement(metadata, self._tag("LastChange")).text = _format_timestamp(document.lastChange)

        page = ET.SubElement(root, self._tag("Page"), {
            "imageFilename": document.imageFilename,
            "imageWidth": str(document.width),
            "imageHeight": str(document.height),
        })

        for i, region in enumerate(document.regions):
            self._add_region(page, region, f"r{i}")

        return root

    def _tag(self, name: str) -> str:
        return f"{{{PAGE_XML_NAMESPACE}}}{name}"

    def _add_coords(self, parent: ET.Element, coords: Polygon):
        ET.SubElement(parent, self._tag("Coords"), {"points": coords.toPointsString()})

    def _add_text_equiv(self, parent: ET.Element, text: str, confidence: Optional[float] = None):
        attrs = {}
        if confidence is not None:
            attrs["conf"] = f"{min(1.0, max(0.0, confidence)):.4g}"
        text_equiv = ET.SubElement(parent, self._tag("TextEquiv"), attrs)
        ET.SubElement(text_equiv, self._tag("Unicode")).text = text

    def _add_region(self, page: ET.Element, region: Region, region_id: str):
        attrs = {"id": region_id}
        if region.custom:
            attrs["custom"] = region.custom
        elem = ET.SubElement(page, self._tag(region.regionType.value), attrs)
        self._add_coords(elem, region.coords)

        if isinstance(region, TextRegion):
            for i, line in enumerate(region.textLines):
                self._add_text_line(elem, line, f"{region_id}_l{i}")
            self._add_text_equiv(elem, region.text)

    def _add_text_line(self, parent: ET.Element, line: TextLine, line_id: str):
        elem = ET.SubElement(parent, self._tag("TextLine"), {"id": line_id})
        self._add_coords(elem, line.coords)
        for i, word in enumerate(line.words):
            self._add_word(elem, word, f"{line_id}_w{i}")
        self._add_text_equiv(elem, line.text)

    def _add_word(self, parent: ET.Element, word: Word, word_id: str):
        elem = ET.SubElement(parent, self._tag("Word"), {"id": word_id})
        self._add_coords(elem, word.coords)
        for i, glyph in enumerate(word.glyphs):
            self._add_glyph(elem, glyph, f"{word_id}_g{i}")
        self._add_text_equiv(elem, word.text, word.confidence)

    def _add_glyph(self, parent: ET.Element, glyph: Glyph, glyph_id: str):
        elem = ET.SubElement(parent, self._tag("Glyph"), {"id": glyph_id})
        self._add_coords(elem, glyph.coords)
        self._add_text_equiv(elem, glyph.text, glyph.confidence)
