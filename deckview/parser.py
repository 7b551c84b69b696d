"""Deck parser — splits a markdown document into slides."""

from __future__ import annotations

import logging

from .directives import extract_directives, extract_global_directives
from .models import DELIMITER_RE, Deck, NoSlidesError, Slide

logger = logging.getLogger(__name__)


def split_deck(document: str) -> Deck:
    """Split *document* into a :class:`Deck`.

    A ``<!-- global ... -->`` block at the very start of the document sets
    the deck-wide options.  The rest is split on lines made only of three or
    more hyphens.  Segments are trimmed and empty ones dropped, so the deck
    may end up with no slides at all; :func:`parse_deck` treats that as an
    error.
    """
    text = document.replace("\r\n", "\n")
    global_options, text = extract_global_directives(text)

    slides: list[Slide] = []
    for segment in DELIMITER_RE.split(text):
        source = segment.strip()
        if not source:
            continue
        options, body = extract_directives(source)
        slides.append(Slide(index=len(slides) + 1, source=source, body=body, options=options))
        logger.debug("  Slide %d: %d chars, options=%s", len(slides), len(body), options)

    logger.debug("Split deck: %d slide(s), global options=%s", len(slides), global_options)
    return Deck(slides=slides, options=global_options)


def parse_deck(document: str) -> Deck:
    """Split *document* and require at least one slide."""
    deck = split_deck(document)
    if not deck.slides:
        raise NoSlidesError("No slides found. Is the document empty?")
    return deck


def parse_deck_file(path: str) -> Deck:
    """Read a markdown file and parse it into a :class:`Deck`."""
    with open(path, encoding="utf-8") as f:
        raw = f.read()
    logger.debug("Parsing %s (%d chars)", path, len(raw))
    return parse_deck(raw)
