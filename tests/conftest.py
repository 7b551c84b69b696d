"""Shared fixtures for deckview tests."""

from __future__ import annotations

import textwrap

import pytest


# ---------------------------------------------------------------------------
# Minimal decks (strings) used across multiple test modules
# ---------------------------------------------------------------------------

MINIMAL_DECK = textwrap.dedent("""\
    # Slide One

    Hello world.

    ---

    # Slide Two
    """)

GLOBAL_DECK = textwrap.dedent("""\
    <!-- global transition=fade size=large -->
    # Title
    Intro text
    ---
    <!-- center bg=#222 color=#fff -->
    ## Section
    """)

STYLED_DECK = textwrap.dedent("""\
    <!-- global font=Open+Sans body=medium -->
    <!-- imgpos=left size=huge -->
    # Pictures

    ![A cat](cat.png "Our cat")

    ---

    <!-- font=Roboto bgimg=img/bg.png -->
    ## Plain

    | a | b |
    |---|---|
    | 1 | 2 |
    """)


@pytest.fixture
def tmp_deck(tmp_path):
    """Write MINIMAL_DECK to a temp file and return its path."""
    p = tmp_path / "deck.md"
    p.write_text(MINIMAL_DECK, encoding="utf-8")
    return p


@pytest.fixture
def tmp_global_deck(tmp_path):
    """Write GLOBAL_DECK to a temp file and return its path."""
    p = tmp_path / "talk.md"
    p.write_text(GLOBAL_DECK, encoding="utf-8")
    return p
