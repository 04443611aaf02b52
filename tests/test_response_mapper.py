"""Tests for mapping Cloud Vision annotations to PAGE layout documents.

Covers:
1. Text mode: regions from blocks and paragraphs
2. Line breaking and word text composition
3. Line outlines
4. Degenerate geometry filtering
5. Object mode
"""
from __future__ import annotations

import pytest
from google.cloud import vision

from app.engines import ResponseMapper, get_region_type
from app.models import RegionType, TextRegion

from factories import (
    BlockType, BreakType, block, box, line_poly, localized_object, normalized_box,
    page, paragraph, symbol, text_annotation, word,
)


def map_words(*words, **page_kwargs):
    """Map a single text block holding one paragraph with the given words."""
    annotation = text_annotation(page([block(paragraphs=[paragraph(words)])], **page_kwargs))
    return ResponseMapper(image_filename="scan.png").map_text_annotation(annotation)


# ═══════════════════════════════════════════════════════════════════════════════
# TEXT MODE: DOCUMENT AND REGIONS
# ═══════════════════════════════════════════════════════════════════════════════

def test_hello_world_single_line():
    doc = map_words(
        word("Hello", left=0, top=0),
        word("world", left=60, top=0, break_type=BreakType.UNKNOWN),
        width=1000, height=1500,
    )

    assert (doc.width, doc.height) == (1000, 1500)
    assert doc.imageFilename == "scan.png"
    assert len(doc.regions) == 1

    region = doc.regions[0]
    assert isinstance(region, TextRegion)
    assert region.regionType == RegionType.TEXT
    assert len(region.textLines) == 1

    line = region.textLines[0]
    assert [w.text for w in line.words] == ["Hello", "world"]
    assert all(len(w.glyphs) == 5 for w in line.words)
    assert line.text == "Helloworld"
    assert region.text == line.text


def test_text_block_becomes_one_region_per_paragraph():
    annotation = text_annotation(page([
        block(BlockType.TEXT, paragraphs=[
            paragraph([word("one")], bounding_box=box(0, 0, 100, 30)),
            paragraph([word("two", top=40)], bounding_box=box(0, 40, 100, 70)),
        ], bounding_box=box(0, 0, 100, 70)),
    ]))
    doc = ResponseMapper().map_text_annotation(annotation)

    assert [r.regionType for r in doc.regions] == [RegionType.TEXT, RegionType.TEXT]
    assert doc.regions[0].coords.points == [(0, 0), (100, 0), (100, 30), (0, 30)]
    assert doc.regions[1].text == "two"


@pytest.mark.parametrize("block_type,region_type", [
    (BlockType.PICTURE, RegionType.IMAGE),
    (BlockType.TABLE, RegionType.TABLE),
    (BlockType.RULER, RegionType.SEPARATOR),
    (BlockType.BARCODE, RegionType.GRAPHIC),
    (BlockType.UNKNOWN, RegionType.UNKNOWN),
])
def test_non_text_blocks_keep_block_outline(block_type, region_type):
    annotation = text_annotation(page([block(block_type, bounding_box=box(5, 6, 70, 80))]))
    doc = ResponseMapper().map_text_annotation(annotation)

    assert len(doc.regions) == 1
    region = doc.regions[0]
    assert region.regionType == region_type
    assert not isinstance(region, TextRegion)
    assert region.coords.points == [(5, 6), (70, 6), (70, 80), (5, 80)]


def test_region_type_classification():
    assert get_region_type(BlockType.TEXT) == RegionType.TEXT
    assert get_region_type(BlockType.PICTURE) == RegionType.IMAGE
    assert get_region_type(99) == RegionType.UNKNOWN


def test_block_order_is_preserved():
    annotation = text_annotation(page([
        block(BlockType.PICTURE, bounding_box=box(0, 0, 10, 10)),
        block(BlockType.TEXT, paragraphs=[paragraph([word("a")])]),
        block(BlockType.RULER, bounding_box=box(0, 20, 100, 22)),
    ]))
    doc = ResponseMapper().map_text_annotation(annotation)
    assert [r.regionType for r in doc.regions] == [RegionType.IMAGE, RegionType.TEXT, RegionType.SEPARATOR]


def test_only_first_page_is_converted():
    annotation = text_annotation(
        page([block(paragraphs=[paragraph([word("first")])])], width=300, height=400),
        page([block(paragraphs=[paragraph([word("second")])])], width=500, height=600),
    )
    doc = ResponseMapper().map_text_annotation(annotation)
    assert (doc.width, doc.height) == (300, 400)
    assert [r.text for r in doc.regions] == ["first"]


def test_no_pages_gives_no_document():
    assert ResponseMapper().map_text_annotation(vision.TextAnnotation()) is None


def test_missing_annotation_raises():
    with pytest.raises(ValueError):
        ResponseMapper().map_text_annotation(None)


def test_normalized_text_geometry_uses_page_size():
    w = word("ab", symbols=[
        symbol("a", normalized_box(0.0, 0.0, 0.1, 0.1)),
        symbol("b", normalized_box(0.1, 0.0, 0.2, 0.1)),
    ], bounding_box=normalized_box(0.0, 0.0, 0.2, 0.1))
    annotation = text_annotation(page(
        [block(paragraphs=[paragraph([w], bounding_box=normalized_box(0.0, 0.0, 0.5, 0.5))])],
        width=200, height=400,
    ))
    doc = ResponseMapper().map_text_annotation(annotation)

    region = doc.regions[0]
    assert region.coords.points == [(0, 0), (100, 0), (100, 200), (0, 200)]
    mapped_word = region.textLines[0].words[0]
    assert mapped_word.coords.points == [(0, 0), (40, 0), (40, 40), (0, 40)]
    assert mapped_word.glyphs[1].coords.points[0] == (20, 0)


# ═══════════════════════════════════════════════════════════════════════════════
# LINE BREAKING AND TEXT COMPOSITION
# ═══════════════════════════════════════════════════════════════════════════════

def test_hyphen_appends_dash_and_starts_new_line():
    doc = map_words(
        word("exam", break_type=BreakType.HYPHEN),
        word("ple", top=30),
    )
    region = doc.regions[0]

    assert [line.text for line in region.textLines] == ["exam-", "ple"]
    assert region.textLines[0].words[0].text == "exam-"
    assert len(region.textLines[0].words[0].glyphs) == 4


@pytest.mark.parametrize("break_type", [BreakType.LINE_BREAK, BreakType.EOL_SURE_SPACE])
def test_line_ending_breaks_start_new_line_without_punctuation(break_type):
    doc = map_words(
        word("end", break_type=break_type),
        word("next", top=30),
    )
    lines = doc.regions[0].textLines

    assert len(lines) == 2
    assert lines[0].words[0].text == "end"
    assert lines[1].words[0].text == "next"


@pytest.mark.parametrize("break_type", [BreakType.SPACE, BreakType.SURE_SPACE, BreakType.UNKNOWN])
def test_space_breaks_stay_on_the_same_line(break_type):
    doc = map_words(
        word("same", break_type=break_type),
        word("line", left=60),
    )
    assert len(doc.regions[0].textLines) == 1


def test_last_symbol_break_wins():
    w = word("ab", symbols=[
        symbol("a", box(0, 0, 10, 20), break_type=BreakType.LINE_BREAK),
        symbol("b", box(10, 0, 20, 20), break_type=BreakType.SPACE),
    ])
    doc = map_words(w, word("cd", left=30))
    assert len(doc.regions[0].textLines) == 1


def test_unknown_break_does_not_override_earlier_break():
    w = word("ab", symbols=[
        symbol("a", box(0, 0, 10, 20), break_type=BreakType.LINE_BREAK),
        symbol("b", box(10, 0, 20, 20), break_type=BreakType.UNKNOWN),
    ])
    doc = map_words(w, word("cd", top=30))
    assert len(doc.regions[0].textLines) == 2


def test_region_text_joins_lines_with_newline():
    doc = map_words(
        word("first", break_type=BreakType.LINE_BREAK),
        word("second", top=30, break_type=BreakType.EOL_SURE_SPACE),
        word("third", top=60, break_type=BreakType.LINE_BREAK),
    )
    assert doc.regions[0].text == "first\nsecond\nthird"


def test_confidences_are_copied():
    w = word("ok", confidence=0.75, symbols=[
        symbol("o", box(0, 0, 10, 20), confidence=0.5),
        symbol("k", box(10, 0, 20, 20), confidence=0.25),
    ])
    mapped = map_words(w).regions[0].textLines[0].words[0]

    assert mapped.confidence == pytest.approx(0.75)
    assert [g.confidence for g in mapped.glyphs] == [pytest.approx(0.5), pytest.approx(0.25)]
    assert [g.text for g in mapped.glyphs] == ["o", "k"]


# ═══════════════════════════════════════════════════════════════════════════════
# LINE OUTLINES
# ═══════════════════════════════════════════════════════════════════════════════

def test_single_word_line_outline_is_a_copy():
    doc = map_words(word("solo", left=10, top=10))
    line = doc.regions[0].textLines[0]
    mapped_word = line.words[0]

    assert line.coords.points == mapped_word.coords.points
    assert line.coords is not mapped_word.coords

    mapped_word.coords.points[0] = (999, 999)
    assert line.coords.points[0] == (10, 10)


def test_multi_word_line_outline_is_union_rectangle():
    doc = map_words(
        word("up", left=10, top=5, bounding_box=box(10, 5, 30, 25)),
        word("down", left=40, top=12, bounding_box=box(40, 12, 80, 40)),
    )
    line = doc.regions[0].textLines[0]
    assert line.coords.points == [(10, 5), (80, 5), (80, 40), (10, 40)]


# ═══════════════════════════════════════════════════════════════════════════════
# DEGENERATE GEOMETRY
# ═══════════════════════════════════════════════════════════════════════════════

def test_degenerate_paragraph_is_skipped_with_its_words():
    annotation = text_annotation(page([block(paragraphs=[
        paragraph([word("lost")], bounding_box=line_poly(0, 0, 10, 10)),
        paragraph([word("kept")]),
    ])]))
    doc = ResponseMapper().map_text_annotation(annotation)
    assert [r.text for r in doc.regions] == ["kept"]


def test_degenerate_word_is_skipped_and_does_not_open_a_line():
    doc = map_words(
        word("ghost", bounding_box=line_poly(0, 0, 50, 0), break_type=BreakType.LINE_BREAK),
        word("real"),
        word("tail", left=50),
    )
    lines = doc.regions[0].textLines
    assert len(lines) == 1
    assert lines[0].text == "realtail"


def test_paragraph_with_only_degenerate_words_has_no_lines():
    doc = map_words(word("ghost", bounding_box=vision.BoundingPoly()))
    region = doc.regions[0]
    assert region.textLines == []
    assert region.text == ""


def test_degenerate_symbol_is_dropped_with_its_text():
    w = word("abc", symbols=[
        symbol("a", box(0, 0, 10, 20)),
        symbol("b", line_poly(10, 0, 20, 0)),
        symbol("c", box(20, 0, 30, 20)),
    ])
    mapped = map_words(w).regions[0].textLines[0].words[0]
    assert [g.text for g in mapped.glyphs] == ["a", "c"]
    assert mapped.text == "ac"


def test_break_of_degenerate_symbol_still_counts():
    w = word("ab", symbols=[
        symbol("a", box(0, 0, 10, 20)),
        symbol("-", vision.BoundingPoly(), break_type=BreakType.HYPHEN),
    ])
    doc = map_words(w, word("cd", top=30))
    lines = doc.regions[0].textLines
    assert [line.text for line in lines] == ["a-", "cd"]


def test_degenerate_non_text_block_is_dropped():
    annotation = text_annotation(page([block(BlockType.PICTURE, bounding_box=line_poly(0, 0, 5, 5))]))
    doc = ResponseMapper().map_text_annotation(annotation)
    assert doc.regions == []


def test_all_polygons_non_negative():
    doc = map_words(
        word("edge", bounding_box=box(-4, -2, 40, 18), symbols=[
            symbol("e", box(-4, -2, 6, 18)),
            symbol("d", box(6, -2, 16, 18)),
        ]),
        word("next", left=50),
    )
    region = doc.regions[0]
    polygons = [region.coords]
    for line in region.textLines:
        polygons.append(line.coords)
        for w in line.words:
            polygons.append(w.coords)
            polygons.extend(g.coords for g in w.glyphs)
    assert all(x >= 0 and y >= 0 for poly in polygons for x, y in poly.points)


# ═══════════════════════════════════════════════════════════════════════════════
# OBJECT MODE
# ═══════════════════════════════════════════════════════════════════════════════

def test_object_covering_full_image():
    annotations = [localized_object("Cat", normalized_box(0.0, 0.0, 1.0, 1.0))]
    doc = ResponseMapper(image_filename="cat.jpg").map_object_annotations(annotations, 640, 480)

    assert (doc.width, doc.height) == (640, 480)
    assert len(doc.regions) == 1
    region = doc.regions[0]
    assert region.regionType == RegionType.IMAGE
    assert region.custom == "Cat"
    assert region.coords.points == [(0, 0), (640, 0), (640, 480), (0, 480)]


def test_objects_keep_order_and_drop_degenerate():
    annotations = [
        localized_object("Dog", normalized_box(0.1, 0.1, 0.5, 0.5)),
        localized_object("Flat", vision.BoundingPoly(normalized_vertices=[
            vision.NormalizedVertex(x=0.1, y=0.1), vision.NormalizedVertex(x=0.2, y=0.2),
        ])),
        localized_object("Ball", box(10, 10, 20, 20)),
    ]
    doc = ResponseMapper().map_object_annotations(annotations, 100, 100)
    assert [r.custom for r in doc.regions] == ["Dog", "Ball"]
    assert doc.regions[0].coords.points[0] == (10, 10)


def test_no_objects_gives_no_document():
    assert ResponseMapper().map_object_annotations([], 100, 100) is None


def test_missing_object_list_raises():
    with pytest.raises(ValueError):
        ResponseMapper().map_object_annotations(None, 100, 100)
