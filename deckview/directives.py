"""Directive comment parsing — ``<!-- center bg=#222 size=huge -->``."""

from __future__ import annotations

import logging

from .models import DIRECTIVE_RE, OptionSet

logger = logging.getLogger(__name__)

GLOBAL_KEYWORD = "global"


def parse_tokens(tokens: list[str]) -> OptionSet:
    """Turn directive tokens into an option set.

    ``key=value`` tokens are split on the first ``=`` only, so the value may
    itself contain ``=``.  Bare words become boolean flags.
    """
    options: OptionSet = {}
    for token in tokens:
        if "=" in token:
            key, value = token.split("=", 1)
            if not key:
                logger.debug("Ignoring directive token without a key: %r", token)
                continue
            options[key] = value
        else:
            options[token] = True
    return options


def extract_directives(text: str, keyword: str | None = None) -> tuple[OptionSet, str]:
    """Extract a leading directive block from *text*.

    Returns ``(options, remainder)``.  The block must start at the very first
    character of *text*; otherwise (or when the closing ``-->`` is missing)
    the options are empty and *text* is returned unchanged.

    With *keyword* set (e.g. ``"global"``) the block only counts when its
    first token is exactly that keyword; the keyword itself is not part of
    the returned options.
    """
    match = DIRECTIVE_RE.match(text)
    if not match:
        return {}, text

    tokens = match.group(1).split()
    if keyword is not None:
        if not tokens or tokens[0] != keyword:
            return {}, text
        tokens = tokens[1:]

    options = parse_tokens(tokens)
    remainder = text[match.end():].lstrip()
    logger.debug("Directive block (%s): %s", keyword or "slide", options)
    return options, remainder


def extract_global_directives(text: str) -> tuple[OptionSet, str]:
    """Extract a ``<!-- global ... -->`` block from the start of a document."""
    return extract_directives(text, keyword=GLOBAL_KEYWORD)
