"""
Response Mapper: Cloud Vision annotations to PAGE layout documents.

Text detection results arrive as a hierarchy (page -> blocks -> paragraphs
-> words -> symbols); object localization results as a flat list. Both are
mapped onto Document -> Region -> TextLine -> Word -> Glyph. Elements whose
outline has two points or fewer are dropped together with their content.
"""
from typing import Optional, Sequence

from google.cloud import vision

from api.core import get_logger
from app.models import Document, RegionType, TextRegion, TextLine, Word
from app.utils import convert_bounding_poly, line_polygon_from_words

logger = get_logger("vision2page.mapper")

BlockType = vision.Block.BlockType
BreakType = vision.TextAnnotation.DetectedBreak.BreakType

BLOCK_REGION_TYPES = {
    BlockType.TEXT: RegionType.TEXT,
    BlockType.PICTURE: RegionType.IMAGE,
    BlockType.TABLE: RegionType.TABLE,
    BlockType.RULER: RegionType.SEPARATOR,
    BlockType.BARCODE: RegionType.GRAPHIC,
}

# Breaks after which the next word starts a new text line
LINE_ENDING_BREAKS = (BreakType.LINE_BREAK, BreakType.EOL_SURE_SPACE, BreakType.HYPHEN)


def get_region_type(block_type) -> RegionType:
    """Classify a Vision block type; unlisted types map to UNKNOWN."""
    return BLOCK_REGION_TYPES.get(block_type, RegionType.UNKNOWN)


class ResponseMapper:
    """
    Builds one Document from one annotation response.

    The page size set while mapping is the scaling basis for every
    normalized vertex met afterwards.
    """

    def __init__(self, image_filename: str = "", creator: str = ""):
        self.image_filename = image_filename
        self.creator = creator
        self.width = 0
        self.height = 0

    def _new_document(self, width: int, height: int) -> Document:
        self.width = int(width)
        self.height = int(height)
        document = Document(imageFilename=self.image_filename, creator=self.creator)
        document.setSize(self.width, self.height)
        return document

    def _polygon(self, bounding_poly):
        return convert_bounding_poly(bounding_poly, self.width, self.height)

    # ------------------------------------------------------------------
    # Text mode
    # ------------------------------------------------------------------
    def map_text_annotation(self, text_annotation) -> Optional[Document]:
        """
        Map a full text annotation to a Document.

        Only the first page is used. Returns None when the annotation has
        no pages.

        Raises:
            ValueError: if no annotation is given at all
        """
        if text_annotation is None:
            raise ValueError("No text annotation in response")

        pages = list(text_annotation.pages)
        logger.debug(f"{len(pages)} page(s) in text annotation")
        if not pages:
            return None
        if len(pages) > 1:
            logger.warning(f"Text annotation has {len(pages)} pages; only the first one is converted")

        return self.map_page(pages[0])

    def map_page(self, vision_page) -> Document:
        document = self._new_document(vision_page.width, vision_page.height)

        for block in vision_page.blocks:
            self._map_block(block, document)

        logger.info(
            f"Mapped page {document.width}x{document.height} to {len(document.regions)} regions",
            extra={"extra_data": {"text_regions": len(document.textRegions)}}
        )
        return document

    def _map_block(self, block, document: Document):
        region_type = get_region_type(block.block_type)

        # Text blocks are represented by their paragraphs
        if region_type == RegionType.TEXT:
            for paragraph in block.paragraphs:
                self._map_paragraph(paragraph, document)
            return

        coords = self._polygon(block.bounding_box)
        if coords.isDegenerate():
            logger.debug(f"Dropped {region_type.value} block with {coords.getSize()} points")
            return
        document.createRegion(region_type, coords)

    def _map_paragraph(self, paragraph, document: Document):
        coords = self._polygon(paragraph.bounding_box)
        if coords.isDegenerate():
            logger.debug(f"Dropped paragraph with {coords.getSize()} points")
            return

        region: TextRegion = document.createRegion(RegionType.TEXT, coords)

        current_line: Optional[TextLine] = None
        for vision_word in paragraph.words:
            coords = self._polygon(vision_word.bounding_box)
            if coords.isDegenerate():
                continue

            if current_line is None:
                current_line = region.createTextLine()

            word = current_line.createWord(coords)
            word.confidence = float(vision_word.confidence)

            break_type = self._map_symbols(vision_word.symbols, word)

            text = word.composeText()
            if break_type == BreakType.HYPHEN:
                text += "-"
            word.text = text

            if break_type in LINE_ENDING_BREAKS:
                finish_text_line(current_line)
                current_line = None

        if current_line is not None:
            finish_text_line(current_line)

        region.text = region.composeText()

    def _map_symbols(self, symbols: Sequence, word: Word):
        """Create the word's glyphs; return the break type of the last symbol that has one."""
        word_break_type = BreakType.UNKNOWN
        for symbol in symbols:
            symbol_break_type = symbol.property.detected_break.type_
            if symbol_break_type != BreakType.UNKNOWN:
                word_break_type = symbol_break_type

            coords = self._polygon(symbol.bounding_box)
            if coords.isDegenerate():
                continue
            glyph = word.createGlyph(coords)
            glyph.text = symbol.text
            glyph.confidence = float(symbol.confidence)
        return word_break_type

    # ------------------------------------------------------------------
    # Object mode
    # ------------------------------------------------------------------
    def map_object_annotations(self, annotations: Sequence, width: int, height: int) -> Optional[Document]:
        """
        Map localized objects to labelled image regions.

        The response carries no page size, so the caller passes the image
        size. Returns None when there are no annotations.
        """
        if annotations is None:
            raise ValueError("No object annotations in response")

        annotations = list(annotations)
        if not annotations:
            return None

        document = self._new_document(width, height)
        for annotation in annotations:
            coords = self._polygon(annotation.bounding_poly)
            if coords.isDegenerate():
                logger.debug(f"Dropped object '{annotation.name}' with {coords.getSize()} points")
                continue
            region = document.createRegion(RegionType.IMAGE, coords)
            region.custom = annotation.name

        logger.info(f"Mapped {len(annotations)} objects to {len(document.regions)} image regions")
        return document


def finish_text_line(line: TextLine):
    """Derive the outline and text of a completed line from its words."""
    coords = line_polygon_from_words(line.words)
    if coords is not None:
        line.coords = coords
    line.text = line.composeText()
