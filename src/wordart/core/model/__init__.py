"""Content records for the three slide templates.

Keep this module as a thin re-export layer so callers can import a stable path:

    from wordart.core.model import SentenceSlide, TemplateKind
"""

from __future__ import annotations

from .content import (
    CARDS_PER_SLIDE,
    GeneratedDeck,
    SentenceSegment,
    SentenceSlide,
    SlideRecord,
    TemplateKind,
    WordCardGridSlide,
    WordCardItem,
    WordExampleSegment,
    WordSlide,
    chunk_word_cards,
    grid_count,
    records_from_dicts,
)

__all__ = [
    "CARDS_PER_SLIDE",
    "GeneratedDeck",
    "SentenceSegment",
    "SentenceSlide",
    "SlideRecord",
    "TemplateKind",
    "WordCardGridSlide",
    "WordCardItem",
    "WordExampleSegment",
    "WordSlide",
    "chunk_word_cards",
    "grid_count",
    "records_from_dicts",
]
