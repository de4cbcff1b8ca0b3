from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path

import orjson

from wordart.core.errors import ExportError, GenerationError, MalformedPayloadError, WordartError
from wordart.core.generate.ollama_client import OllamaConfig, OllamaGenerator
from wordart.core.model.content import GeneratedDeck, TemplateKind
from wordart.core.render import colors
from wordart.core.render.colors import ColorPicker
from wordart.core.render.pptx_renderer import pptx_file_name, save_presentation, assemble_deck, merge_decks
from wordart.core.session import LessonSession, selected_decks
from wordart.core.session.session import DEFAULT_FILE_NAMES, merged_file_name
from wordart.core.validate.schema_validate import load_json, validate_deck_file
from wordart.core.validate.schemas import SCHEMAS

logger = logging.getLogger(__name__)

MAX_SHOWN_ERRORS = 30


def _picker(seed: int | None) -> ColorPicker:
    if seed is None:
        return colors.pick
    return random.Random(seed).choice


def _print_errors(errs: list[str]) -> None:
    for m in errs[:MAX_SHOWN_ERRORS]:
        print(f"  - {m}")
    if len(errs) > MAX_SHOWN_ERRORS:
        print(f"  ... ({len(errs)} errors)")


def _load_deck(path: Path) -> GeneratedDeck:
    errs = validate_deck_file(path)
    if errs:
        raise MalformedPayloadError(f"invalid deck file: {path}", errs)
    return GeneratedDeck.from_dict(load_json(path))


def _unlink_quietly(path: Path) -> None:
    # Do not leave stale output behind.
    try:
        if path.exists():
            path.unlink()
    except OSError:
        pass


def cmd_paths(_: argparse.Namespace) -> int:
    cfg = OllamaConfig.from_env()
    print(f"ollama.host: {cfg.host}")
    print(f"ollama.model: {cfg.model or '(unset)'}")
    for name in SCHEMAS:
        print(f"schema: {name}")
    for kind, name in DEFAULT_FILE_NAMES.items():
        print(f"default_name.{kind.value}: {pptx_file_name(name)}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    out_path = Path(args.out).resolve()

    if args.input:
        in_path = Path(args.input).resolve()
        if not in_path.exists():
            print(f"[NG] input not found: {in_path}")
            return 2
        text = in_path.read_text(encoding="utf-8")
    else:
        text = args.text or ""
    if not text.strip():
        print("[NG] input text is empty")
        return 2

    try:
        cfg = OllamaConfig.from_env(
            host=args.ollama_host,
            model=args.ollama_model,
            temperature=args.temperature,
            read_timeout_s=args.read_timeout,
        )
        session = LessonSession(OllamaGenerator(cfg))
    except ValueError as e:
        print(f"[NG] {e} (use --ollama_model or WORDART_OLLAMA_MODEL)")
        return 2

    deck = None
    err: Exception | None = None
    # explicit re-issue of the whole request; the session itself never retries
    for attempt in range(args.retries + 1):
        try:
            deck = session.generate(text, args.kind)
            break
        except GenerationError as e:
            err = e
            logger.warning("generate attempt %d failed: %s", attempt + 1, e)

    if deck is None:
        print("[NG] generation failed")
        print(f"      detail: {err}")
        if isinstance(err, MalformedPayloadError):
            _print_errors(err.errors)
        return 2

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(orjson.dumps(deck.to_dict(), option=orjson.OPT_INDENT_2))
    except OSError as e:
        print(f"[NG] failed to write deck: {out_path}")
        print(f"      detail: {e}")
        return 2
    print(f"[OK] generated {len(deck.slides)} {deck.kind.value} slides: {out_path}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    any_ng = False
    for p in args.decks:
        path = Path(p).resolve()
        errs = validate_deck_file(path)
        if errs:
            any_ng = True
            print(f"[NG] {path.as_posix()}")
            _print_errors(errs)
        else:
            print(f"[OK] {path.as_posix()}")
    return 2 if any_ng else 0


def cmd_render(args: argparse.Namespace) -> int:
    deck_path = Path(args.deck).resolve()
    try:
        deck = _load_deck(deck_path)
    except MalformedPayloadError as e:
        print(f"[NG] {e}")
        _print_errors(e.errors)
        return 2

    name = args.title or DEFAULT_FILE_NAMES[deck.kind]
    out_path = Path(args.out).resolve() if args.out else Path.cwd() / pptx_file_name(name)
    try:
        prs = assemble_deck(deck.kind, deck.slides, title=name, pick=_picker(args.seed))
        save_presentation(prs, out_path)
    except (ExportError, TypeError) as e:
        _unlink_quietly(out_path)
        print("[NG] render failed")
        print(f"      detail: {e}")
        return 2
    print(f"[OK] rendered {len(deck.slides)} slides: {out_path}")
    return 0


def cmd_merge(args: argparse.Namespace) -> int:
    session = LessonSession(pick=_picker(args.seed))

    # Decks are given oldest first; the history keeps them newest first.
    for p in args.decks:
        path = Path(p).resolve()
        try:
            session.add_deck(_load_deck(path))
        except (MalformedPayloadError, ValueError) as e:
            print(f"[NG] {path.as_posix()}: {e}")
            if isinstance(e, MalformedPayloadError):
                _print_errors(e.errors)
            return 2
    session.select_all()

    decks = selected_decks(session.history, session.selection, chronological=not args.newest_first)
    name = args.title or merged_file_name(len(decks))
    out_path = Path(args.out).resolve() if args.out else Path.cwd() / pptx_file_name(name)
    try:
        prs = merge_decks(decks, title=name, pick=session.pick)
        save_presentation(prs, out_path)
    except (WordartError, TypeError) as e:
        _unlink_quietly(out_path)
        print("[NG] merge failed")
        print(f"      detail: {e}")
        return 2
    n_slides = sum(len(d.slides) for d in decks)
    print(f"[OK] merged {len(decks)} decks ({n_slides} slides): {out_path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(prog="wordart")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    kinds = [k.value for k in TemplateKind]

    p_paths = sub.add_parser("paths", help="show schemas, default names and ollama settings")
    p_paths.set_defaults(func=cmd_paths)

    p_gen = sub.add_parser("generate", help="generate a deck file from text via ollama")
    p_gen.add_argument("--kind", required=True, choices=kinds)
    src = p_gen.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="source text or topic")
    src.add_argument("--input", help="read source text from a file")
    p_gen.add_argument("--out", required=True, help="output deck .json path")
    p_gen.add_argument("--ollama_model", default=None, help="default: $WORDART_OLLAMA_MODEL")
    p_gen.add_argument("--ollama_host", default=None, help="default: $WORDART_OLLAMA_HOST or localhost")
    p_gen.add_argument("--temperature", type=float, default=None)
    p_gen.add_argument("--read_timeout", type=int, default=None, help="max seconds to wait for one request")
    p_gen.add_argument("--retries", type=int, default=0, help="re-issue a failed request this many times")
    p_gen.set_defaults(func=cmd_generate)

    p_val = sub.add_parser("validate", help="validate deck files against the deck schema")
    p_val.add_argument("decks", nargs="+", help="deck .json files")
    p_val.set_defaults(func=cmd_validate)

    p_rnd = sub.add_parser("render", help="render one deck file to .pptx")
    p_rnd.add_argument("deck", help="deck .json file")
    p_rnd.add_argument("--out", required=False, help="output .pptx path (default: <title>.pptx)")
    p_rnd.add_argument("--title", required=False, help="presentation title")
    p_rnd.add_argument("--seed", type=int, default=None, help="fix color choice")
    p_rnd.set_defaults(func=cmd_render)

    p_mrg = sub.add_parser("merge", help="merge deck files (oldest first) into one .pptx")
    p_mrg.add_argument("decks", nargs="+", help="deck .json files, oldest first")
    p_mrg.add_argument("--out", required=False, help="output .pptx path (default: Merged_PPT_<n>_Files.pptx)")
    p_mrg.add_argument("--title", required=False, help="presentation title")
    p_mrg.add_argument("--newest-first", action="store_true", help="put the last given deck first")
    p_mrg.add_argument("--seed", type=int, default=None, help="fix color choice")
    p_mrg.set_defaults(func=cmd_merge)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
