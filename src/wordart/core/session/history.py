from __future__ import annotations

from typing import Iterable, Iterator

from wordart.core.model.content import GeneratedDeck


class DeckHistory:
    """Most-recent-first list of generated decks. Append-one and clear-all only."""

    def __init__(self) -> None:
        self._decks: list[GeneratedDeck] = []

    def append(self, deck: GeneratedDeck) -> None:
        if any(d.id == deck.id for d in self._decks):
            raise ValueError(f"duplicate deck id: {deck.id}")
        self._decks.insert(0, deck)

    def clear(self) -> None:
        self._decks.clear()

    def get(self, deck_id: str) -> GeneratedDeck | None:
        for d in self._decks:
            if d.id == deck_id:
                return d
        return None

    def ids(self) -> list[str]:
        return [d.id for d in self._decks]

    def __iter__(self) -> Iterator[GeneratedDeck]:
        return iter(list(self._decks))

    def __len__(self) -> int:
        return len(self._decks)


class DeckSelection:
    """Deck ids chosen for merging. A lookup set; decks never see it."""

    def __init__(self) -> None:
        self._ids: set[str] = set()

    def toggle(self, deck_id: str) -> bool:
        """Flip membership; returns True if the id is now selected."""
        if deck_id in self._ids:
            self._ids.discard(deck_id)
            return False
        self._ids.add(deck_id)
        return True

    def select_all(self, deck_ids: Iterable[str]) -> None:
        self._ids = set(deck_ids)

    def toggle_all(self, deck_ids: Iterable[str]) -> None:
        # everything selected -> nothing, otherwise -> everything
        ids = set(deck_ids)
        if ids and self._ids == ids:
            self._ids = set()
        else:
            self._ids = ids

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, deck_id: object) -> bool:
        return deck_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)


def selected_decks(
    history: DeckHistory,
    selection: DeckSelection,
    *,
    chronological: bool = True,
) -> list[GeneratedDeck]:
    """Selected decks from the history, oldest first unless `chronological` is False."""
    picked = [d for d in history if d.id in selection]
    if chronological:
        picked.reverse()
    return picked
