from __future__ import annotations

from wordart.core.model.content import TemplateKind

SENTENCE_SYSTEM = """\
You are an expert content formatter for language learning slides.
Take the user's input and output a list of English sentences paired with their Chinese translations.

CRITICAL RULE FOR COLOR MATCHING:
Break each sentence down into corresponding segments (meaning units) so that each English phrase matches one Chinese phrase.
Example:
Input: "I like apples."
Output segments: [
  { "en": "I", "cn": "我" },
  { "en": "like", "cn": "喜欢" },
  { "en": "apples", "cn": "苹果" }
]

Rules:
1. If the user provides a topic, generate useful conversational sentences about that topic.
2. If the user provides raw text, split it into logical sentence pairs and segment them.
3. Keep sentences concise enough to fit on a slide (10-15 words at most).
4. PRESERVE SPEAKER NAMES: if the input contains speaker names (e.g. "Alice:", "Bob:"), keep them as the first segment.
   Example: { "en": "Alice:", "cn": "爱丽丝：" }
"""

WORD_SYSTEM = """\
You are an English teacher creating vocabulary slides for BEGINNER/ELEMENTARY students.
For each word provided by the user:
1. Identify the word.
2. Create TWO distinct example sentences.
3. CRITICAL: break each sentence down into word-for-word or phrase-for-phrase segments mapping English to Chinese.
   This is for color-coded learning (e.g. "The cat" -> "这只猫", "is" -> "是", "cute" -> "可爱的").
4. The example sentences MUST use very simple, high-frequency vocabulary (CEFR A1/A2 level).
"""

WORD_CARD_SYSTEM = """\
You are an expert vocabulary card generator.
Extract words from the input, or generate relevant words if a topic is provided.
For each word, provide:
1. The English word (Title Case).
2. The IPA phonetic transcription (e.g. /həˈləʊ/).
3. The Chinese meaning (concise).
"""

_SENTENCE_USER = """\
Input Source:
"{text}"

Return an object with an "items" array. Each item must have a "segments" array of {{en, cn}} pairs.
"""

_WORD_USER = """\
Input Words/Topic:
"{text}"

Return an object with an "items" array. Each item represents one word and includes:
- "word": the target word (Title Case)
- "ex1_segments": array of {{en, cn}} objects for the first sentence
- "ex2_segments": array of {{en, cn}} objects for the second sentence

Make sure the 'en' and 'cn' segments correspond in meaning so they can be colored identically.
"""

_WORD_CARD_USER = """\
Input Words/Topic:
"{text}"

Return an object with an "items" array of {{english, phonetic, chinese}} objects.
"""


def build_messages(kind: TemplateKind, text: str) -> list[dict[str, str]]:
    if kind is TemplateKind.SENTENCE:
        system, user = SENTENCE_SYSTEM, _SENTENCE_USER
    elif kind is TemplateKind.WORD:
        system, user = WORD_SYSTEM, _WORD_USER
    elif kind is TemplateKind.WORD_CARD:
        system, user = WORD_CARD_SYSTEM, _WORD_CARD_USER
    else:
        raise ValueError(f"unknown template kind: {kind!r}")
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user.format(text=text)},
    ]
