from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Sequence

from wordart.core.errors import ExportError, SessionBusyError
from wordart.core.model.content import GeneratedDeck, SlideRecord, TemplateKind
from wordart.core.render import colors
from wordart.core.render.colors import ColorPicker
from wordart.core.render.pptx_renderer import export_merged, export_single
from wordart.core.session.history import DeckHistory, DeckSelection, selected_decks

logger = logging.getLogger(__name__)

Generator = Callable[[str, TemplateKind], Sequence[SlideRecord]]

_DECK_LABELS = {
    TemplateKind.SENTENCE: "Conversation",
    TemplateKind.WORD: "Examples",
    TemplateKind.WORD_CARD: "WordCards",
}

DEFAULT_FILE_NAMES = {
    TemplateKind.SENTENCE: "PPT_生成_对话内容",
    TemplateKind.WORD: "PPT_例句_单词组名",
    TemplateKind.WORD_CARD: "PPT_单词学习卡_单词组名",
}


def deck_name(kind: TemplateKind, created_at: float) -> str:
    stamp = datetime.fromtimestamp(created_at).strftime("%H:%M:%S")
    return f"PPT_{_DECK_LABELS[kind]}_{stamp}"


def merged_file_name(n_decks: int) -> str:
    return f"Merged_PPT_{n_decks}_Files"


def new_deck(kind: TemplateKind, slides: Sequence[SlideRecord], *, created_at: float | None = None) -> GeneratedDeck:
    ts = time.time() if created_at is None else created_at
    return GeneratedDeck(
        id=uuid.uuid4().hex,
        name=deck_name(kind, ts),
        kind=kind,
        created_at=ts,
        slides=tuple(slides),
    )


class LessonSession:
    """Orchestrates generate/export over one in-memory history.

    At most one generate or export runs at a time; a second call while one is
    outstanding raises SessionBusyError.
    """

    def __init__(self, generator: Generator | None = None, *, pick: ColorPicker = colors.pick) -> None:
        self.generator = generator
        self.pick = pick
        self.history = DeckHistory()
        self.selection = DeckSelection()
        self.current: GeneratedDeck | None = None
        self._busy = False

    @contextmanager
    def _in_flight(self, what: str) -> Iterator[None]:
        if self._busy:
            raise SessionBusyError(f"cannot {what}: another operation is in progress")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def generate(self, text: str, kind: TemplateKind | str) -> GeneratedDeck:
        """Generate one deck. A new request drops the current deck; on failure the history is untouched."""
        if self.generator is None:
            raise RuntimeError("no content generator configured")
        k = TemplateKind.parse(kind)
        with self._in_flight("generate"):
            self.current = None
            records = self.generator(text, k)
            deck = new_deck(k, records)
            self.add_deck(deck)
        logger.info("deck %s added (%d slides)", deck.name, len(deck.slides))
        return deck

    def add_deck(self, deck: GeneratedDeck) -> None:
        self.history.append(deck)
        self.current = deck

    def clear_history(self) -> None:
        self.history.clear()
        self.selection.clear()
        self.current = None

    def toggle(self, deck_id: str) -> bool:
        return self.selection.toggle(deck_id)

    def toggle_all(self) -> None:
        self.selection.toggle_all(self.history.ids())

    def select_all(self) -> None:
        self.selection.select_all(self.history.ids())

    def export_current(self, file_name: str | None = None) -> bytes:
        deck = self.current
        if deck is None:
            raise ExportError("nothing to export: no deck has been generated")
        name = file_name or DEFAULT_FILE_NAMES[deck.kind]
        with self._in_flight("export"):
            return export_single(deck.slides, deck.kind, name, pick=self.pick)

    def export_selected(self, file_name: str | None = None, *, chronological: bool = True) -> bytes:
        decks = selected_decks(self.history, self.selection, chronological=chronological)
        if not decks:
            raise ExportError("nothing to merge: no decks selected")
        name = file_name or merged_file_name(len(decks))
        with self._in_flight("merge"):
            return export_merged(decks, name, pick=self.pick)
