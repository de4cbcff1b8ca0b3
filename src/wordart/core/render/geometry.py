"""Fixed slide geometry for the three templates.

All values are centimetres on a portrait canvas. Every function here is a pure
function of the module constants: content never moves a box.
"""

from __future__ import annotations

from dataclasses import dataclass

PAGE_WIDTH_CM = 32.15
PAGE_HEIGHT_CM = 33.87
MARGIN_CM = 1.0

SAFE_WIDTH_CM = PAGE_WIDTH_CM - MARGIN_CM * 2
SAFE_HEIGHT_CM = PAGE_HEIGHT_CM - MARGIN_CM * 2

# Sentence template
SENTENCE_GAP_CM = 1.5

# Word-example template: hand-tuned offsets from the top edge.
WORD_TITLE_Y_CM = 2.5
WORD_TITLE_H_CM = 3.0
WORD_EX1_EN_Y_CM = WORD_TITLE_Y_CM + 6.0
WORD_EX1_CN_Y_CM = WORD_EX1_EN_Y_CM + 3.8
WORD_EX2_EN_Y_CM = WORD_EX1_CN_Y_CM + 9.0
WORD_EX2_CN_Y_CM = WORD_EX2_EN_Y_CM + 3.8
WORD_TEXT_H_CM = 4.0

# Word-card grid
CARD_ROWS = 4
CARD_SPLIT_RATIO = 0.65
CARD_COL_GAP_CM = 0.5
# one 80pt line is roughly 2.8cm tall
CARD_WORD_LINE_H_CM = 2.8


@dataclass(frozen=True)
class Box:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class SentenceLayout:
    source: Box
    target: Box


@dataclass(frozen=True)
class WordLayout:
    title: Box
    ex1_source: Box
    ex1_target: Box
    ex2_source: Box
    ex2_target: Box


@dataclass(frozen=True)
class CardRowLayout:
    word: Box
    phonetic: Box
    meaning: Box


def sentence_layout() -> SentenceLayout:
    box_h = (PAGE_HEIGHT_CM - (MARGIN_CM * 2 + SENTENCE_GAP_CM)) / 2
    return SentenceLayout(
        source=Box(MARGIN_CM, MARGIN_CM, SAFE_WIDTH_CM, box_h),
        target=Box(MARGIN_CM, MARGIN_CM + box_h + SENTENCE_GAP_CM, SAFE_WIDTH_CM, box_h),
    )


def word_layout() -> WordLayout:
    def _row(y: float, h: float = WORD_TEXT_H_CM) -> Box:
        return Box(MARGIN_CM, y, SAFE_WIDTH_CM, h)

    return WordLayout(
        title=_row(WORD_TITLE_Y_CM, WORD_TITLE_H_CM),
        ex1_source=_row(WORD_EX1_EN_Y_CM),
        ex1_target=_row(WORD_EX1_CN_Y_CM),
        ex2_source=_row(WORD_EX2_EN_Y_CM),
        ex2_target=_row(WORD_EX2_CN_Y_CM),
    )


def word_card_layout() -> tuple[CardRowLayout, ...]:
    """Four rows top to bottom; row i holds card i."""
    row_h = SAFE_HEIGHT_CM / CARD_ROWS
    left_w = SAFE_WIDTH_CM * CARD_SPLIT_RATIO
    right_w = SAFE_WIDTH_CM * (1 - CARD_SPLIT_RATIO)
    half_gap = CARD_COL_GAP_CM / 2

    rows: list[CardRowLayout] = []
    for idx in range(CARD_ROWS):
        row_y = MARGIN_CM + idx * row_h
        right_x = MARGIN_CM + left_w + half_gap
        rows.append(
            CardRowLayout(
                word=Box(MARGIN_CM, row_y, left_w - half_gap, CARD_WORD_LINE_H_CM),
                phonetic=Box(
                    MARGIN_CM,
                    row_y + CARD_WORD_LINE_H_CM,
                    left_w - half_gap,
                    row_h - CARD_WORD_LINE_H_CM,
                ),
                meaning=Box(right_x, row_y, right_w - half_gap, row_h),
            )
        )
    return tuple(rows)
