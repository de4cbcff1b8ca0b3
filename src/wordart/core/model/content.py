from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Union

from wordart.core.errors import MalformedPayloadError

# Grid capacity of one word-card slide.
CARDS_PER_SLIDE = 4


class TemplateKind(str, enum.Enum):
    SENTENCE = "sentence"
    WORD = "word"
    WORD_CARD = "word_card"

    @classmethod
    def parse(cls, v: Any) -> "TemplateKind":
        if isinstance(v, cls):
            return v
        s = str(v or "").strip().lower().replace("-", "_")
        # accept the original app's mode names too
        aliases = {
            "sentence_pairs": cls.SENTENCE,
            "word_examples": cls.WORD,
            "word_cards": cls.WORD_CARD,
        }
        if s in aliases:
            return aliases[s]
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"unknown template kind: {v!r}") from None


def _path(base: str, key: str | int) -> str:
    return base + (f"[{key!r}]" if isinstance(key, str) else f"[{key}]")


def _req_str(obj: Any, key: str, where: str) -> str:
    if not isinstance(obj, dict):
        raise MalformedPayloadError(f"{where}: expected an object")
    if key not in obj:
        raise MalformedPayloadError(f"{_path(where, key)}: required field is missing")
    v = obj[key]
    if not isinstance(v, str):
        raise MalformedPayloadError(f"{_path(where, key)}: expected a string")
    return v


def _req_list(obj: Any, key: str, where: str) -> list[Any]:
    if not isinstance(obj, dict):
        raise MalformedPayloadError(f"{where}: expected an object")
    if key not in obj:
        raise MalformedPayloadError(f"{_path(where, key)}: required field is missing")
    v = obj[key]
    if not isinstance(v, list):
        raise MalformedPayloadError(f"{_path(where, key)}: expected an array")
    return v


@dataclass(frozen=True)
class SentenceSegment:
    """One meaning unit: an English phrase and its Chinese counterpart."""

    en: str
    cn: str

    @classmethod
    def from_dict(cls, obj: Any, where: str = "$") -> "SentenceSegment":
        return cls(en=_req_str(obj, "en", where), cn=_req_str(obj, "cn", where))

    def to_dict(self) -> dict[str, str]:
        return {"en": self.en, "cn": self.cn}


@dataclass(frozen=True)
class WordExampleSegment(SentenceSegment):
    """Segment of one example sentence of a vocabulary word."""


def _segments(cls: type[SentenceSegment], items: list[Any], where: str) -> tuple[Any, ...]:
    return tuple(cls.from_dict(it, _path(where, i)) for i, it in enumerate(items))


@dataclass(frozen=True)
class SentenceSlide:
    kind: ClassVar[TemplateKind] = TemplateKind.SENTENCE

    segments: tuple[SentenceSegment, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any, where: str = "$") -> "SentenceSlide":
        items = _req_list(obj, "segments", where)
        return cls(segments=_segments(SentenceSegment, items, _path(where, "segments")))

    def to_dict(self) -> dict[str, Any]:
        return {"segments": [s.to_dict() for s in self.segments]}


@dataclass(frozen=True)
class WordSlide:
    kind: ClassVar[TemplateKind] = TemplateKind.WORD

    word: str
    example1: tuple[WordExampleSegment, ...] = ()
    example2: tuple[WordExampleSegment, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any, where: str = "$") -> "WordSlide":
        word = _req_str(obj, "word", where)
        ex1 = _req_list(obj, "ex1_segments", where)
        ex2 = _req_list(obj, "ex2_segments", where)
        return cls(
            word=word,
            example1=_segments(WordExampleSegment, ex1, _path(where, "ex1_segments")),
            example2=_segments(WordExampleSegment, ex2, _path(where, "ex2_segments")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "ex1_segments": [s.to_dict() for s in self.example1],
            "ex2_segments": [s.to_dict() for s in self.example2],
        }


@dataclass(frozen=True)
class WordCardItem:
    word: str
    phonetic: str
    meaning: str

    @classmethod
    def from_dict(cls, obj: Any, where: str = "$") -> "WordCardItem":
        return cls(
            word=_req_str(obj, "english", where),
            phonetic=_req_str(obj, "phonetic", where),
            meaning=_req_str(obj, "chinese", where),
        )

    def to_dict(self) -> dict[str, str]:
        return {"english": self.word, "phonetic": self.phonetic, "chinese": self.meaning}


@dataclass(frozen=True)
class WordCardGridSlide:
    """Up to four vocabulary cards; renderers ignore anything past the fourth."""

    kind: ClassVar[TemplateKind] = TemplateKind.WORD_CARD

    items: tuple[WordCardItem, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any, where: str = "$") -> "WordCardGridSlide":
        items = _req_list(obj, "items", where)
        where_items = _path(where, "items")
        return cls(items=tuple(WordCardItem.from_dict(it, _path(where_items, i)) for i, it in enumerate(items)))

    def to_dict(self) -> dict[str, Any]:
        return {"items": [it.to_dict() for it in self.items]}


SlideRecord = Union[SentenceSlide, WordSlide, WordCardGridSlide]

RECORD_TYPES: dict[TemplateKind, type] = {
    TemplateKind.SENTENCE: SentenceSlide,
    TemplateKind.WORD: WordSlide,
    TemplateKind.WORD_CARD: WordCardGridSlide,
}


def chunk_word_cards(items: Iterable[WordCardItem], size: int = CARDS_PER_SLIDE) -> list[WordCardGridSlide]:
    """Group cards into grid slides of `size`, keeping order; the last may be partial."""
    if size <= 0:
        raise ValueError("size must be positive")
    seq = list(items)
    return [WordCardGridSlide(items=tuple(seq[i : i + size])) for i in range(0, len(seq), size)]


def grid_count(n_items: int, size: int = CARDS_PER_SLIDE) -> int:
    return math.ceil(n_items / size) if n_items > 0 else 0


def records_from_dicts(kind: TemplateKind | str, slides: Any, where: str = "$") -> list[SlideRecord]:
    """Decode a list of wire-format slide dicts into records of one kind."""
    k = TemplateKind.parse(kind)
    if not isinstance(slides, list):
        raise MalformedPayloadError(f"{where}: expected an array of slides")
    cls = RECORD_TYPES[k]
    return [cls.from_dict(s, _path(where, i)) for i, s in enumerate(slides)]


@dataclass(frozen=True)
class GeneratedDeck:
    """One completed generation result; lives only in the session history."""

    id: str
    name: str
    kind: TemplateKind
    created_at: float
    slides: tuple[SlideRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for i, s in enumerate(self.slides):
            if getattr(s, "kind", None) is not self.kind:
                raise ValueError(f"slide {i} is {type(s).__name__}, deck kind is {self.kind.value}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": "0.1",
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "created_at": self.created_at,
            "slides": [s.to_dict() for s in self.slides],
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "GeneratedDeck":
        if not isinstance(obj, dict):
            raise MalformedPayloadError("$: expected a deck object")
        try:
            kind = TemplateKind.parse(obj.get("kind"))
        except ValueError as e:
            raise MalformedPayloadError(f"$['kind']: {e}") from None
        created_at = obj.get("created_at", 0.0)
        if not isinstance(created_at, (int, float)):
            raise MalformedPayloadError("$['created_at']: expected a number")
        return cls(
            id=_req_str(obj, "id", "$"),
            name=_req_str(obj, "name", "$"),
            kind=kind,
            created_at=float(created_at),
            slides=tuple(records_from_dicts(kind, obj.get("slides"), "$['slides']")),
        )
