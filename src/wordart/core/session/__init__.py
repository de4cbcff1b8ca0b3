"""In-memory session state: deck history, merge selection and the orchestrator."""

from __future__ import annotations

from .history import DeckHistory, DeckSelection, selected_decks
from .session import LessonSession, deck_name, merged_file_name, new_deck

__all__ = [
    "DeckHistory",
    "DeckSelection",
    "LessonSession",
    "deck_name",
    "merged_file_name",
    "new_deck",
    "selected_decks",
]
