"""deckview — Render a markdown slide deck to a standalone HTML page."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from .cascade import resolve_options
from .detect import detect_source
from .loader import DEFAULT_TIMEOUT, DeckLoadError, encode_deck, load_deck, shareable_url
from .models import Deck, NoSlidesError
from .parser import parse_deck
from .renderer import SlideRenderer
from .styles import to_render_config

logger = logging.getLogger(__name__)


def _configure_logging(log_file: str | None, verbose: bool) -> list[logging.Handler]:
    """Attach the requested handlers to the package logger and return them."""
    root = logging.getLogger("deckview")
    root.setLevel(logging.DEBUG)
    handlers: list[logging.Handler] = []
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        root.addHandler(file_handler)
        handlers.append(file_handler)
    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
        root.addHandler(stream_handler)
        handlers.append(stream_handler)
    return handlers


def _default_output(source: str) -> Path:
    if detect_source(source) == "file":
        return Path(source).with_suffix(".html")
    return Path("deck.html")


def _clamp_slide(slide: int, deck: Deck) -> int:
    """Clamp a 1-based slide number into the deck's range."""
    clamped = min(max(slide, 1), len(deck))
    if clamped != slide:
        logger.warning("Slide %d out of range, showing slide %d of %d", slide, clamped, len(deck))
        print(f"  Slide {slide} out of range, showing slide {clamped}")
    return clamped


def _inspect(deck: Deck) -> str:
    report = {"global": deck.options, "slides": []}
    for slide in deck.slides:
        config = to_render_config(resolve_options(slide, deck))
        report["slides"].append({
            "index": slide.index,
            "options": resolve_options(slide, deck),
            "classes": list(config.classes),
            "style": config.style_vars,
            "font": config.font_resource.url if config.font_resource else None,
            "image_class": config.img_wrap_class,
        })
    return json.dumps(report, indent=2)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="deckview",
        description="Render a markdown slide deck to a standalone HTML page.",
    )
    parser.add_argument("source",
                        help="Markdown file, or a deck parameter: base64:..., url:..., "
                             "github:user/repo/branch/file.md, hackmd:<note id>")
    parser.add_argument("--output", "-o", help="Output HTML path (default: <input>.html or deck.html)")
    parser.add_argument("--slide", type=int, default=None,
                        help="Render only this slide (1-based)")
    parser.add_argument("--title", default=None, help="HTML page title (default: source name)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help=f"Network timeout in seconds for remote sources (default: {DEFAULT_TIMEOUT:g})")
    parser.add_argument("--log-file", help="Write a debug log to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--base-url", help="Viewer base URL used by --encode to build a shareable link")

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("--encode", action="store_true",
                            help="Print the base64 deck parameter instead of rendering")
    mode_group.add_argument("--inspect", action="store_true",
                            help="Print resolved options and render config per slide as JSON")

    args = parser.parse_args()
    handlers = _configure_logging(args.log_file, args.verbose)
    try:
        _run(args)
    finally:
        root = logging.getLogger("deckview")
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()


def _run(args: argparse.Namespace) -> None:
    logger.info("CLI arguments: %s", vars(args))

    if detect_source(args.source) == "file" and not Path(args.source).exists():
        print(f"Error: {args.source} not found.", file=sys.stderr)
        sys.exit(1)

    try:
        t0 = time.monotonic()
        loaded = load_deck(args.source, timeout=args.timeout)
        deck = parse_deck(loaded.content)
        logger.info("Parsed %d slide(s) in %.2fs", len(deck), time.monotonic() - t0)
    except (DeckLoadError, NoSlidesError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.encode:
        print(encode_deck(loaded.content))
        if args.base_url:
            slide = _clamp_slide(args.slide, deck) - 1 if args.slide else 0
            print(shareable_url(loaded.content, args.base_url, slide))
        return

    if args.inspect:
        print(_inspect(deck))
        return

    output_path = Path(args.output) if args.output else _default_output(args.source)
    slide = _clamp_slide(args.slide, deck) if args.slide is not None else None
    title = args.title or (Path(args.source).stem if loaded.source.startswith("file:") else loaded.source)

    print(f"  Source: {loaded.source}")
    print(f"  Found {len(deck)} slides")
    try:
        page = SlideRenderer().render_deck(deck, title=title, slide=slide)
        output_path.write_text(page, encoding="utf-8")
    except Exception:
        logger.exception("Rendering failed")
        raise

    print(f"Output: {output_path}")


if __name__ == "__main__":
    main()
