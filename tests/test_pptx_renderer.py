"""
Tests for slide rendering, deck assembly, merging and export.
"""

from io import BytesIO

import pytest
from pptx import Presentation
from pptx.enum.text import MSO_AUTO_SIZE
from pptx.oxml.ns import qn
from pptx.util import Cm, Pt

from wordart.core.model.content import (
    SentenceSegment,
    SentenceSlide,
    TemplateKind,
    WordCardGridSlide,
    WordSlide,
    chunk_word_cards,
)
from wordart.core.render import colors
from wordart.core.render import pptx_renderer as r
from wordart.core.render.geometry import PAGE_HEIGHT_CM, PAGE_WIDTH_CM, sentence_layout


def _runs(shape):
    return shape.text_frame.paragraphs[0].runs


def _rgb(run):
    return str(run.font.color.rgb)


def _texts(slide):
    return [(sh.name, [run.text for run in _runs(sh)]) for sh in slide.shapes]


def test_sentence_scenario(picker, sentence_slide):
    prs = r.assemble_deck(TemplateKind.SENTENCE, [sentence_slide], pick=picker)
    assert len(prs.slides) == 1
    src, tgt = list(prs.slides[0].shapes)
    assert src.name == "sentence_source"
    assert tgt.name == "sentence_target"

    src_runs, tgt_runs = _runs(src), _runs(tgt)
    assert [x.text for x in src_runs] == ["I ", "like "]
    assert [x.text for x in tgt_runs] == ["我", "喜欢"]
    assert [_rgb(x) for x in src_runs] == [_rgb(x) for x in tgt_runs]
    # one pick per segment
    assert picker.calls == 2


def test_sentence_runs_follow_segments(picker):
    segs = tuple(SentenceSegment(f"w{i}", f"词{i}") for i in range(25))
    prs = r.assemble_deck("sentence", [SentenceSlide(segments=segs)], pick=picker)
    src, tgt = list(prs.slides[0].shapes)
    assert len(_runs(src)) == len(_runs(tgt)) == 25
    for a, b in zip(_runs(src), _runs(tgt)):
        assert _rgb(a) == _rgb(b)
        assert _rgb(a) in colors.SENTENCE_COLOR_POOL


def test_sentence_random_colors_pairwise_match():
    segs = tuple(SentenceSegment(f"w{i}", f"词{i}") for i in range(40))
    prs = r.assemble_deck("sentence", [SentenceSlide(segments=segs)])
    src, tgt = list(prs.slides[0].shapes)
    assert [_rgb(x) for x in _runs(src)] == [_rgb(x) for x in _runs(tgt)]


def test_sentence_geometry_and_style(picker, sentence_slide):
    prs = r.assemble_deck(TemplateKind.SENTENCE, [sentence_slide], pick=picker)
    src, tgt = list(prs.slides[0].shapes)
    lay = sentence_layout()
    assert (src.left, src.top, src.width, src.height) == (
        Cm(lay.source.left), Cm(lay.source.top), Cm(lay.source.width), Cm(lay.source.height)
    )
    assert tgt.top == Cm(lay.target.top)

    tf = src.text_frame
    assert tf.word_wrap is True
    assert tf.auto_size == MSO_AUTO_SIZE.NONE
    assert tf.margin_left == 0 and tf.margin_top == 0

    en, cn = _runs(src)[0], _runs(tgt)[0]
    assert en.font.size == Pt(80) and cn.font.size == Pt(80)
    assert en.font.bold is True and cn.font.bold is True
    assert en.font.name == r.LATIN_FACE
    assert cn.font.name == r.CJK_FACE
    assert cn._r.rPr.find(qn("a:ea")).get("typeface") == r.CJK_FACE
    assert en._r.rPr.find(qn("a:ea")) is None


def test_empty_segments_render_empty_rows(picker):
    prs = r.assemble_deck("sentence", [SentenceSlide(segments=())], pick=picker)
    src, tgt = list(prs.slides[0].shapes)
    assert len(_runs(src)) == 0 and len(_runs(tgt)) == 0
    assert picker.calls == 0


def test_word_slide_examples(picker, word_slide):
    prs = r.assemble_deck(TemplateKind.WORD, [word_slide], pick=picker)
    shapes = list(prs.slides[0].shapes)
    assert [s.name for s in shapes] == [
        "word_title",
        "example1_source",
        "example1_target",
        "example2_source",
        "example2_target",
    ]
    title, e1s, e1t, e2s, e2t = shapes
    assert [x.text for x in _runs(title)] == ["Apple"]
    assert [x.text for x in _runs(e1s)] == ["I ", "eat ", "an apple "]
    assert [x.text for x in _runs(e2t)] == ["这个苹果", "是红色的"]

    for src, tgt in ((e1s, e1t), (e2s, e2t)):
        assert [_rgb(x) for x in _runs(src)] == [_rgb(x) for x in _runs(tgt)]
    all_runs = _runs(title) + _runs(e1s) + _runs(e1t) + _runs(e2s) + _runs(e2t)
    assert all(_rgb(x) in colors.WORD_COLOR_POOL for x in all_runs)
    # title + 3 + 2 segments
    assert picker.calls == 6


def test_word_examples_colored_independently(word_slide):
    seq = iter(["05AEC0", "FB3701", "FAC006", "B1B76D", "05AEC0", "FB3701"])
    prs = r.assemble_deck(TemplateKind.WORD, [word_slide], pick=lambda pool: next(seq))
    _, e1s, _, e2s, e2t = list(prs.slides[0].shapes)
    assert [_rgb(x) for x in _runs(e1s)] == ["FB3701", "FAC006", "B1B76D"]
    assert [_rgb(x) for x in _runs(e2s)] == ["05AEC0", "FB3701"]
    assert [_rgb(x) for x in _runs(e2t)] == ["05AEC0", "FB3701"]


def test_missing_word_fails_before_adding_slide(picker):
    prs = r.new_presentation("t")
    with pytest.raises(TypeError):
        r.render_word_slide(prs, WordSlide(word=None), pick=picker)
    assert len(prs.slides) == 0


@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_word_card_rows_populated(n, make_cards):
    prs = r.assemble_deck(TemplateKind.WORD_CARD, [WordCardGridSlide(items=tuple(make_cards(n)))])
    shapes = list(prs.slides[0].shapes)
    assert len(shapes) == 3 * n
    rows = {s.name.split("_")[0] for s in shapes}
    assert rows == {f"card{i + 1}" for i in range(n)}


def test_word_card_style(card_grid):
    prs = r.assemble_deck(TemplateKind.WORD_CARD, [card_grid])
    word, phonetic, meaning = list(prs.slides[0].shapes)[:3]
    assert _runs(word)[0].text == "Word0"
    assert _rgb(_runs(word)[0]) == colors.CARD_WORD_RGB
    assert _runs(phonetic)[0].font.size == Pt(65)
    assert _rgb(_runs(phonetic)[0]) == colors.CARD_PHONETIC_RGB
    assert _runs(meaning)[0].text == "词0"
    assert _rgb(_runs(meaning)[0]) == colors.CARD_MEANING_RGB
    assert meaning.left > word.left + word.width


def test_oversized_grid_renders_first_four(make_cards):
    items = tuple(make_cards(6))
    prs = r.assemble_deck(TemplateKind.WORD_CARD, [WordCardGridSlide(items=items)])
    texts = [run.text for sh in prs.slides[0].shapes for run in _runs(sh)]
    assert len(prs.slides[0].shapes) == 12
    assert "Word3" in texts
    assert "Word4" not in texts and "Word5" not in texts


def test_five_cards_two_slides(make_cards):
    grids = chunk_word_cards(make_cards(5))
    prs = r.assemble_deck(TemplateKind.WORD_CARD, grids)
    assert len(prs.slides) == 2
    assert len(prs.slides[0].shapes) == 12
    assert len(prs.slides[1].shapes) == 3


def test_assemble_keeps_record_order(picker):
    records = [SentenceSlide(segments=(SentenceSegment(f"s{i}", f"句{i}"),)) for i in range(5)]
    prs = r.assemble_deck("sentence", records, pick=picker)
    assert [_runs(s.shapes[0])[0].text for s in prs.slides] == [f"s{i} " for i in range(5)]


def test_merge_concatenates_in_given_order(sentence_slide, word_slide, card_grid):
    a = (TemplateKind.SENTENCE, [sentence_slide, sentence_slide])
    b = (TemplateKind.WORD_CARD, [card_grid])
    c = (TemplateKind.WORD, [word_slide])

    merged = r.merge_decks([a, b, c], title="merged")
    expected = []
    for kind, records in (a, b, c):
        expected.extend(_texts(s) for s in r.assemble_deck(kind, records).slides)
    assert [_texts(s) for s in merged.slides] == expected
    assert merged.core_properties.title == "merged"


def test_render_record_rejects_unknown_kind(sentence_slide):
    with pytest.raises(ValueError):
        r.render_record(r.new_presentation("t"), "poster", sentence_slide)


@pytest.mark.parametrize("kind", ["sentence", "Sentence_Pairs", TemplateKind.SENTENCE])
def test_render_record_accepts_wire_names(kind, sentence_slide):
    prs = r.new_presentation("t")
    slide = r.render_record(prs, kind, sentence_slide)
    assert len(prs.slides) == 1
    assert slide.shapes[0].name == "sentence_source"


def test_color_that_is_not_hex_fails_loudly(sentence_slide):
    prs = r.new_presentation("t")
    with pytest.raises(ValueError):
        r.render_sentence_slide(prs, sentence_slide, pick=lambda pool: "teal")


def test_color_accepts_leading_hash(sentence_slide):
    slide = r.render_sentence_slide(r.new_presentation("t"), sentence_slide, pick=lambda pool: "#ff6247")
    assert {_rgb(x) for x in _runs(slide.shapes[0])} == {"FF6247"}


def test_canvas_and_background(sentence_slide):
    prs = r.assemble_deck("sentence", [sentence_slide], title="Deck")
    assert prs.slide_width == Cm(PAGE_WIDTH_CM)
    assert prs.slide_height == Cm(PAGE_HEIGHT_CM)
    assert str(prs.slides[0].background.fill.fore_color.rgb) == "FFFFFF"


def test_export_zero_slides_is_valid():
    data = r.export_single([], TemplateKind.SENTENCE, "Empty")
    prs = Presentation(BytesIO(data))
    assert len(prs.slides) == 0
    assert prs.core_properties.title == "Empty"


def test_export_merged_roundtrip(sentence_slide, card_grid):
    data = r.export_merged([(TemplateKind.SENTENCE, [sentence_slide]), ("word_card", [card_grid])], "Merged_PPT_2_Files")
    prs = Presentation(BytesIO(data))
    assert len(prs.slides) == 2


class _BrokenPresentation:
    def save(self, _file):
        raise RuntimeError("disk on fire")


def test_save_presentation_wraps_errors(tmp_path):
    with pytest.raises(r.ExportError):
        r.save_presentation(_BrokenPresentation(), tmp_path / "x.pptx")
    assert not (tmp_path / "x.pptx").exists()


def test_pptx_file_name():
    assert r.pptx_file_name("Deck") == "Deck.pptx"
    assert r.pptx_file_name("Deck.PPTX") == "Deck.PPTX"
    assert r.pptx_file_name("  ") == "presentation.pptx"
