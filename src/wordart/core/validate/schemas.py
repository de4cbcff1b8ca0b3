from __future__ import annotations

from typing import Any

from wordart.core.model.content import TemplateKind


def _segment_array() -> dict[str, Any]:
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "en": {"type": "string"},
                "cn": {"type": "string"},
            },
            "required": ["en", "cn"],
        },
    }


def sentence_slide_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {"segments": _segment_array()},
        "required": ["segments"],
    }


def word_slide_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "word": {"type": "string"},
            "ex1_segments": _segment_array(),
            "ex2_segments": _segment_array(),
        },
        "required": ["word", "ex1_segments", "ex2_segments"],
    }


def word_card_item_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "english": {"type": "string"},
            "phonetic": {"type": "string"},
            "chinese": {"type": "string"},
        },
        "required": ["english", "phonetic", "chinese"],
    }


def word_card_grid_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "items": {"type": "array", "maxItems": 4, "items": word_card_item_schema()},
        },
        "required": ["items"],
    }


def generation_schema(kind: TemplateKind) -> dict[str, Any]:
    """Structured-output schema sent with the generation request.

    Word cards come back as a flat item list; grouping into grids happens
    after decoding.
    """
    if kind is TemplateKind.SENTENCE:
        item = sentence_slide_schema()
    elif kind is TemplateKind.WORD:
        item = word_slide_schema()
    elif kind is TemplateKind.WORD_CARD:
        item = word_card_item_schema()
    else:
        raise ValueError(f"unknown template kind: {kind!r}")
    return {
        "type": "object",
        "properties": {"items": {"type": "array", "items": item}},
        "required": ["items"],
    }


def deck_schema() -> dict[str, Any]:
    """Schema of a deck file written by `wordart generate`."""
    def _branch(kind: TemplateKind, slide: dict[str, Any]) -> dict[str, Any]:
        return {
            "if": {"properties": {"kind": {"const": kind.value}}},
            "then": {"properties": {"slides": {"type": "array", "items": slide}}},
        }

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "schema_version": {"type": "string"},
            "id": {"type": "string", "minLength": 1},
            "name": {"type": "string"},
            "kind": {"enum": [k.value for k in TemplateKind]},
            "created_at": {"type": "number"},
            "slides": {"type": "array"},
        },
        "required": ["schema_version", "id", "name", "kind", "created_at", "slides"],
        "allOf": [
            _branch(TemplateKind.SENTENCE, sentence_slide_schema()),
            _branch(TemplateKind.WORD, word_slide_schema()),
            _branch(TemplateKind.WORD_CARD, word_card_grid_schema()),
        ],
    }


SCHEMAS = {
    "deck": deck_schema,
    "sentence_slide": sentence_slide_schema,
    "word_slide": word_slide_schema,
    "word_card_grid": word_card_grid_schema,
}
