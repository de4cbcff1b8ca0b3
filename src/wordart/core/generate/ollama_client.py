from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import orjson
import requests

from wordart.core.errors import GenerationError, MalformedPayloadError
from wordart.core.generate.prompts import build_messages
from wordart.core.model.content import (
    SlideRecord,
    TemplateKind,
    WordCardItem,
    chunk_word_cards,
    records_from_dicts,
)
from wordart.core.validate.schema_validate import validate_instance
from wordart.core.validate.schemas import generation_schema

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:11434"
CONNECT_TIMEOUT_S = 10


@dataclass(frozen=True)
class OllamaConfig:
    model: str
    host: str = DEFAULT_HOST
    temperature: float = 0.2
    num_predict: int = 4096
    read_timeout_s: int = 600
    keep_alive: str = "30m"

    @classmethod
    def from_env(cls, **overrides: Any) -> "OllamaConfig":
        """Defaults from WORDART_OLLAMA_HOST / WORDART_OLLAMA_MODEL, then overrides."""
        base: dict[str, Any] = {
            "model": os.environ.get("WORDART_OLLAMA_MODEL", ""),
            "host": os.environ.get("WORDART_OLLAMA_HOST", DEFAULT_HOST),
        }
        base.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**base)


def ollama_chat_stream(
    session: requests.Session,
    host: str,
    payload: dict,
    read_timeout_s: int,
) -> str:
    url = f"{host.rstrip('/')}/api/chat"
    # stream=True keeps bytes flowing on long generations
    with session.post(url, json=payload, stream=True, timeout=(CONNECT_TIMEOUT_S, read_timeout_s)) as r:
        r.raise_for_status()
        parts: list[str] = []
        for line in r.iter_lines(decode_unicode=True):
            if not line:
                continue
            obj = orjson.loads(line)
            if not isinstance(obj, dict):
                raise GenerationError(f"unexpected stream line: {line!r}")
            if obj.get("error"):
                raise GenerationError(f"ollama error: {obj['error']}")
            msg = obj.get("message") or {}
            if not isinstance(msg, dict):
                raise GenerationError(f"unexpected stream message: {msg!r}")
            if msg.get("content"):
                parts.append(msg["content"])
            if obj.get("done"):
                break
        return "".join(parts).strip()


def decode_payload(kind: TemplateKind, raw: str) -> list[SlideRecord]:
    """Turn the model's JSON reply into slide records; fail fast on anything off-schema."""
    if not raw or not raw.strip():
        raise GenerationError("no content generated")
    try:
        data = orjson.loads(raw.encode("utf-8"))
    except orjson.JSONDecodeError as e:
        raise MalformedPayloadError(f"payload is not valid JSON: {e}") from e

    # Some models drop the wrapper object and return the array directly.
    if isinstance(data, list):
        data = {"items": data}

    errors = validate_instance(generation_schema(kind), data)
    if errors:
        raise MalformedPayloadError(f"payload does not match the {kind.value} schema", errors)

    items = data["items"]
    if kind is TemplateKind.WORD_CARD:
        cards = [WordCardItem.from_dict(it, f"$['items'][{i}]") for i, it in enumerate(items)]
        return list(chunk_word_cards(cards))
    return records_from_dicts(kind, items, "$['items']")


class OllamaGenerator:
    """Content-generation collaborator backed by an Ollama chat endpoint.

    Callable as `generator(text, kind) -> list[SlideRecord]`. No retries and no
    partial results: any failure raises GenerationError.
    """

    def __init__(self, config: OllamaConfig, session: requests.Session | None = None) -> None:
        if not config.model:
            raise ValueError("ollama model is not configured")
        self.config = config
        self.session = session or requests.Session()

    def build_payload(self, text: str, kind: TemplateKind) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": build_messages(kind, text),
            "stream": True,
            "format": generation_schema(kind),
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.num_predict,
            },
            "keep_alive": self.config.keep_alive,
        }

    def __call__(self, text: str, kind: TemplateKind | str) -> list[SlideRecord]:
        k = TemplateKind.parse(kind)
        payload = self.build_payload(text, k)
        logger.info("generating %s content with %s", k.value, self.config.model)
        try:
            raw = ollama_chat_stream(self.session, self.config.host, payload, self.config.read_timeout_s)
        except requests.RequestException as e:
            raise GenerationError(f"{type(e).__name__}: {e}") from e
        except orjson.JSONDecodeError as e:
            raise GenerationError(f"unreadable stream from ollama: {e}") from e
        records = decode_payload(k, raw)
        logger.info("generated %d %s slides", len(records), k.value)
        return records
