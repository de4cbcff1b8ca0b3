from __future__ import annotations

import random
from typing import Callable, Sequence

# Sentence-pair template (19 colors).
SENTENCE_COLOR_POOL: tuple[str, ...] = (
    "FF6247", "FE8666", "FD3E01", "FE9A2E", "FAC006",
    "B0B673", "749258", "32CD32", "00D643", "2E8B57",
    "00CED1", "12B0B5", "1E90FE", "6A5ACD", "A676FE",
    "8A2BE2", "CA27FF", "FF1493", "E85A66",
)

# Word-example template (18 colors).
WORD_COLOR_POOL: tuple[str, ...] = (
    "05AEC0", "FB3701", "FAC006", "B1B76D", "E95A66", "FE8666",
    "739852", "00D643", "CA27FF", "FF9A2E", "A676FF", "BA4C48",
    "FEE07D", "0A64DC", "78C8A0", "C878E6", "FA8C3C", "50B6E6",
)

# Word-card grid uses fixed colors per field.
CARD_WORD_RGB = "000000"
CARD_PHONETIC_RGB = "808080"
CARD_MEANING_RGB = "0070C0"

BACKGROUND_RGB = "FFFFFF"

ColorPicker = Callable[[Sequence[str]], str]


def pick(pool: Sequence[str]) -> str:
    """Uniform random choice; every call is independent."""
    if not pool:
        raise ValueError("color pool is empty")
    return random.choice(pool)

