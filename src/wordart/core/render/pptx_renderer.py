from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Sequence

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_AUTO_SIZE, PP_ALIGN, MSO_VERTICAL_ANCHOR
from pptx.util import Cm, Pt
from pptx.oxml.xmlchemy import OxmlElement
from pptx.oxml.ns import qn

from wordart.core.errors import ExportError
from wordart.core.model.content import (
    CARDS_PER_SLIDE,
    SentenceSegment,
    SentenceSlide,
    SlideRecord,
    TemplateKind,
    WordCardGridSlide,
    WordSlide,
)
from wordart.core.render import colors
from wordart.core.render.colors import ColorPicker
from wordart.core.render.geometry import (
    PAGE_HEIGHT_CM,
    PAGE_WIDTH_CM,
    Box,
    sentence_layout,
    word_card_layout,
    word_layout,
)

logger = logging.getLogger(__name__)

PRIMARY_FONT_PT = 80
PHONETIC_FONT_PT = 65

# English runs and numerals
LATIN_FACE = "Arial Black"
# Chinese runs
CJK_FACE = "Microsoft YaHei"
PHONETIC_FACE = "Arial"

# Trailing spacing after every English fragment.
SEGMENT_SEPARATOR = " "

BLANK_LAYOUT_INDEX = 6


def _rgb(hex_str: str) -> RGBColor:
    """'RRGGBB' (or '#RRGGBB') → RGBColor; raises ValueError on anything else."""
    s = hex_str.lstrip("#")
    if len(s) != 6:
        raise ValueError(f"not an RRGGBB color: {hex_str!r}")
    return RGBColor.from_string(s.upper())


def _require_text(v: Any, what: str) -> str:
    if not isinstance(v, str):
        raise TypeError(f"{what}: expected str, got {type(v).__name__}")
    return v


def _require_segments(segments: Any, what: str) -> Sequence[SentenceSegment]:
    if segments is None or isinstance(segments, (str, bytes)):
        raise TypeError(f"{what}: expected a sequence of segments")
    for i, seg in enumerate(segments):
        _require_text(getattr(seg, "en", None), f"{what}[{i}].en")
        _require_text(getattr(seg, "cn", None), f"{what}[{i}].cn")
    return segments


def _set_east_asian_font(run: Any, face: str) -> None:
    # python-pptx only exposes <a:latin>; CJK glyphs are picked from <a:ea>.
    rPr = run._r.get_or_add_rPr()
    ea = rPr.find(qn("a:ea"))
    if ea is None:
        ea = OxmlElement("a:ea")
        rPr.append(ea)
    ea.set("typeface", face)


def _new_slide(prs: Any) -> Any:
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = _rgb(colors.BACKGROUND_RGB)
    return slide


def _add_text_box(slide: Any, box: Box, *, name: str) -> Any:
    """Fixed box: top/left, wrap on, no autofit, zero inner margins."""
    shape = slide.shapes.add_textbox(Cm(box.left), Cm(box.top), Cm(box.width), Cm(box.height))
    shape.name = name
    tf = shape.text_frame
    tf.word_wrap = True
    tf.auto_size = MSO_AUTO_SIZE.NONE
    tf.vertical_anchor = MSO_VERTICAL_ANCHOR.TOP
    tf.margin_left = tf.margin_right = tf.margin_top = tf.margin_bottom = 0
    tf.paragraphs[0].alignment = PP_ALIGN.LEFT
    return shape


def _add_run(
    paragraph: Any,
    text: str,
    *,
    rgb: str,
    size_pt: int = PRIMARY_FONT_PT,
    face: str = LATIN_FACE,
    east_asian: bool = False,
) -> Any:
    run = paragraph.add_run()
    run.text = text
    font = run.font
    font.size = Pt(size_pt)
    font.name = face
    font.bold = True
    font.color.rgb = _rgb(rgb)
    if east_asian:
        _set_east_asian_font(run, face)
    return run


def _add_segment_rows(
    slide: Any,
    segments: Sequence[SentenceSegment],
    *,
    source_box: Box,
    target_box: Box,
    pool: Sequence[str],
    pick: ColorPicker,
    name: str,
) -> None:
    """Two boxes, one run per segment in each; run i of both rows shares one pick."""
    src_p = _add_text_box(slide, source_box, name=f"{name}_source").text_frame.paragraphs[0]
    tgt_p = _add_text_box(slide, target_box, name=f"{name}_target").text_frame.paragraphs[0]

    for seg in segments:
        rgb = pick(pool)
        _add_run(src_p, seg.en + SEGMENT_SEPARATOR, rgb=rgb)
        _add_run(tgt_p, seg.cn, rgb=rgb, face=CJK_FACE, east_asian=True)


def render_sentence_slide(prs: Any, record: SentenceSlide, *, pick: ColorPicker = colors.pick) -> Any:
    segments = _require_segments(getattr(record, "segments", None), "segments")

    layout = sentence_layout()
    slide = _new_slide(prs)
    _add_segment_rows(
        slide,
        segments,
        source_box=layout.source,
        target_box=layout.target,
        pool=colors.SENTENCE_COLOR_POOL,
        pick=pick,
        name="sentence",
    )
    return slide


def render_word_slide(prs: Any, record: WordSlide, *, pick: ColorPicker = colors.pick) -> Any:
    word = _require_text(getattr(record, "word", None), "word")
    ex1 = _require_segments(getattr(record, "example1", None), "example1")
    ex2 = _require_segments(getattr(record, "example2", None), "example2")

    layout = word_layout()
    pool = colors.WORD_COLOR_POOL
    slide = _new_slide(prs)

    title_p = _add_text_box(slide, layout.title, name="word_title").text_frame.paragraphs[0]
    _add_run(title_p, word, rgb=pick(pool))

    _add_segment_rows(
        slide, ex1, source_box=layout.ex1_source, target_box=layout.ex1_target, pool=pool, pick=pick, name="example1"
    )
    _add_segment_rows(
        slide, ex2, source_box=layout.ex2_source, target_box=layout.ex2_target, pool=pool, pick=pick, name="example2"
    )
    return slide


def render_word_card_slide(prs: Any, record: WordCardGridSlide, *, pick: ColorPicker = colors.pick) -> Any:
    """Render up to four cards; rows without an item stay blank.

    Card colors are fixed per field, so `pick` is accepted only for a uniform
    renderer signature.
    """
    items = getattr(record, "items", None)
    if items is None or isinstance(items, (str, bytes)):
        raise TypeError("items: expected a sequence of word cards")
    items = list(items)[:CARDS_PER_SLIDE]
    for i, it in enumerate(items):
        _require_text(getattr(it, "word", None), f"items[{i}].word")
        _require_text(getattr(it, "phonetic", None), f"items[{i}].phonetic")
        _require_text(getattr(it, "meaning", None), f"items[{i}].meaning")

    rows = word_card_layout()
    slide = _new_slide(prs)
    for idx, it in enumerate(items):
        row = rows[idx]
        p = _add_text_box(slide, row.word, name=f"card{idx + 1}_word").text_frame.paragraphs[0]
        _add_run(p, it.word, rgb=colors.CARD_WORD_RGB)

        p = _add_text_box(slide, row.phonetic, name=f"card{idx + 1}_phonetic").text_frame.paragraphs[0]
        _add_run(p, it.phonetic, rgb=colors.CARD_PHONETIC_RGB, size_pt=PHONETIC_FONT_PT, face=PHONETIC_FACE)

        p = _add_text_box(slide, row.meaning, name=f"card{idx + 1}_meaning").text_frame.paragraphs[0]
        _add_run(p, it.meaning, rgb=colors.CARD_MEANING_RGB, face=CJK_FACE, east_asian=True)
    return slide


def render_record(prs: Any, kind: TemplateKind | str, record: SlideRecord, *, pick: ColorPicker = colors.pick) -> Any:
    """Dispatch one record to the renderer of `kind` (an enum member or its wire name)."""
    kind = TemplateKind.parse(kind)
    if kind is TemplateKind.SENTENCE:
        return render_sentence_slide(prs, record, pick=pick)
    if kind is TemplateKind.WORD:
        return render_word_slide(prs, record, pick=pick)
    if kind is TemplateKind.WORD_CARD:
        return render_word_card_slide(prs, record, pick=pick)
    raise ValueError(f"unknown template kind: {kind!r}")


def new_presentation(title: str) -> Any:
    prs = Presentation()
    prs.slide_width = Cm(PAGE_WIDTH_CM)
    prs.slide_height = Cm(PAGE_HEIGHT_CM)
    prs.core_properties.title = title
    return prs


def _deck_parts(deck: Any) -> tuple[TemplateKind, Sequence[SlideRecord]]:
    """Accept a GeneratedDeck-like object or a (kind, records) pair."""
    if hasattr(deck, "kind") and hasattr(deck, "slides"):
        return TemplateKind.parse(deck.kind), deck.slides
    kind, records = deck
    return TemplateKind.parse(kind), records


def assemble_deck(
    kind: TemplateKind | str,
    records: Iterable[SlideRecord],
    *,
    title: str = "",
    pick: ColorPicker = colors.pick,
) -> Any:
    k = TemplateKind.parse(kind)
    prs = new_presentation(title)
    n = 0
    for record in records:
        render_record(prs, k, record, pick=pick)
        n += 1
    logger.debug("assembled %s deck: %d slides", k.value, n)
    return prs


def merge_decks(decks: Iterable[Any], *, title: str = "", pick: ColorPicker = colors.pick) -> Any:
    """Append every deck's slides in the order given; no reordering here."""
    prs = new_presentation(title)
    for deck in decks:
        kind, records = _deck_parts(deck)
        for record in records:
            render_record(prs, kind, record, pick=pick)
    logger.debug("merged deck: %d slides", len(prs.slides))
    return prs


def pptx_file_name(name: str) -> str:
    s = (name or "").strip() or "presentation"
    return s if s.lower().endswith(".pptx") else f"{s}.pptx"


def presentation_to_bytes(prs: Any) -> bytes:
    buf = BytesIO()
    try:
        prs.save(buf)
    except Exception as e:
        raise ExportError(f"failed to serialize presentation: {e}") from e
    return buf.getvalue()


def save_presentation(prs: Any, out_pptx: Path) -> Path:
    data = presentation_to_bytes(prs)
    try:
        out_pptx.parent.mkdir(parents=True, exist_ok=True)
        out_pptx.write_bytes(data)
    except OSError as e:
        raise ExportError(f"failed to write {out_pptx}: {e}") from e
    return out_pptx


def export_single(
    records: Sequence[SlideRecord],
    kind: TemplateKind | str,
    file_name: str,
    *,
    pick: ColorPicker = colors.pick,
) -> bytes:
    """Render one deck and return the .pptx bytes; the title is the bare file name."""
    title = pptx_file_name(file_name)[: -len(".pptx")]
    return presentation_to_bytes(assemble_deck(kind, records, title=title, pick=pick))


def export_merged(decks: Sequence[Any], file_name: str, *, pick: ColorPicker = colors.pick) -> bytes:
    title = pptx_file_name(file_name)[: -len(".pptx")]
    return presentation_to_bytes(merge_decks(decks, title=title, pick=pick))
