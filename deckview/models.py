"""Shared data models and parsing constants."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# Directive values are strings; bare flags are stored as True.
OptionSet = dict[str, Union[str, bool]]


class OptionKey(str, Enum):
    """Option keys that have a defined rendering effect."""

    CENTER = "center"
    BG = "bg"
    COLOR = "color"
    BGIMG = "bgimg"
    FONT = "font"
    IMGPOS = "imgpos"
    SIZE = "size"
    BODY = "body"
    TRANSITION = "transition"


IMAGE_POSITIONS = ("left", "right", "center")


class NoSlidesError(ValueError):
    """Raised when a document yields no slides at all."""


@dataclass
class Slide:
    index: int
    source: str
    body: str
    options: OptionSet = field(default_factory=dict)


@dataclass
class Deck:
    slides: list[Slide]
    options: OptionSet = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.slides)


@dataclass(frozen=True)
class FontResource:
    family: str
    url: str


@dataclass(frozen=True)
class RenderConfig:
    classes: tuple[str, ...]
    style_vars: dict[str, str]
    font_resource: FontResource | None
    img_wrap_class: str

    @property
    def class_name(self) -> str:
        return " ".join(self.classes)

    def wrap_image(self, src: str, alt: str = "", title: str | None = None) -> str:
        """Return the figure markup for a single rendered image."""
        parts = [
            f'<figure class="{self.img_wrap_class}">',
            f'<img src="{html.escape(src or "")}" alt="{html.escape(alt or "")}" />',
        ]
        if title:
            parts.append(f"<figcaption>{html.escape(title)}</figcaption>")
        parts.append("</figure>")
        return "".join(parts)


# Directive comment anchored at the very start of a text unit.  Content runs
# up to the first closing marker; nesting is not supported.
DIRECTIVE_RE = re.compile(r"\A<!--(.*?)-->", re.DOTALL)

# Slide delimiter: a line made only of three or more hyphens.
DELIMITER_RE = re.compile(r"^-{3,}[ \t]*$", re.MULTILINE)
