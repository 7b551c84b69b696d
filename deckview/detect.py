"""Detect where a deck parameter points and whether content looks like markdown."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

SOURCE_PREFIXES = ("base64", "github", "hackmd", "url")

# Any one of these is enough to accept a text as markdown.
_MARKDOWN_PATTERNS = [
    re.compile(r"^#\s+", re.MULTILINE),        # headings
    re.compile(r"^\*\s+", re.MULTILINE),       # bullet lists
    re.compile(r"^-\s+", re.MULTILINE),        # bullet lists
    re.compile(r"^\d+\.\s+", re.MULTILINE),    # numbered lists
    re.compile(r"\[.*\]\(.*\)"),               # links
    re.compile(r"!\[.*\]\(.*\)"),              # images
    re.compile(r"^\s*---+\s*$", re.MULTILINE), # rules / slide delimiters
    re.compile(r"^\s*```"),                    # code fence
    re.compile(r"^\s*`[^`]+`"),                # inline code
]


def detect_source(param: str) -> str:
    """Return the source type of a deck parameter.

    ``"base64"``, ``"github"``, ``"hackmd"`` or ``"url"`` for prefixed
    parameters (``github:user/repo/branch/slides.md``), ``"file"`` otherwise.
    """
    prefix, sep, _ = param.partition(":")
    if sep and prefix in SOURCE_PREFIXES:
        logger.debug("Deck parameter source: %s", prefix)
        return prefix
    logger.debug("Deck parameter treated as a local file")
    return "file"


def looks_like_markdown(content: str) -> bool:
    trimmed = content.strip()
    if not trimmed:
        return False
    return any(pattern.search(trimmed) for pattern in _MARKDOWN_PATTERNS)
