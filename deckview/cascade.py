"""Slide-over-deck option cascade."""

from __future__ import annotations

from collections.abc import Mapping

from .models import Deck, OptionSet, Slide


def merge_options(
    slide_options: Mapping[str, str | bool],
    global_options: Mapping[str, str | bool],
) -> OptionSet:
    """Merge two option sets; a slide's value replaces the deck's per key.

    Values are scalars, so there is no deep merge.  Neither input is
    modified.
    """
    resolved: OptionSet = dict(global_options)
    resolved.update(slide_options)
    return resolved


def resolve_options(slide: Slide, deck: Deck) -> OptionSet:
    return merge_options(slide.options, deck.options)
