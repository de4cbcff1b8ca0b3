from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from jsonschema import Draft202012Validator

from wordart.core.validate.schemas import deck_schema


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def _json_path(e: Any) -> str:
    path = "$"
    for p in e.path:
        path += f"[{p!r}]" if isinstance(p, str) else f"[{p}]"
    return path


def validate_instance(schema: dict[str, Any], inst: Any) -> list[str]:
    """
    Validate a JSON instance against a JSON schema.
    Returns a list of human-readable error strings (empty if valid).
    Each error is formatted as: "<jsonpath>: <message>"
    """
    v = Draft202012Validator(schema)
    # numeric indices sort as numbers, so [2] comes before [10]
    errors = sorted(v.iter_errors(inst), key=lambda e: [(isinstance(p, str), p) for p in e.path])
    return [f"{_json_path(e)}: {e.message}" for e in errors]


def validate_deck_file(path: Path) -> list[str]:
    if not path.exists():
        return [f"[ERR] deck not found: {path}"]
    try:
        inst = load_json(path)
    except orjson.JSONDecodeError as e:
        return [f"$: not valid JSON ({e})"]
    return validate_instance(deck_schema(), inst)
