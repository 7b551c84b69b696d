"""Render slides to HTML with markdown-it-py."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.tasklists import tasklists_plugin

from .cascade import resolve_options
from .models import Deck, RenderConfig, Slide
from .styles import style_attribute, to_render_config

logger = logging.getLogger(__name__)

# Inline tokens allowed in a paragraph that is unwrapped around its images.
_UNWRAP_ALLOWED = {"image", "link_open", "link_close", "softbreak", "hardbreak"}

DECK_STYLESHEET = """\
body { margin: 0; background: #f3f4f6; font-family: system-ui, sans-serif; }
.slide { box-sizing: border-box; width: 1280px; max-width: 100%; min-height: 720px;
  margin: 2rem auto; background: #fff; border-radius: 8px;
  box-shadow: 0 4px 12px rgba(0, 0, 0, 0.12); overflow: auto; }
.deck-slide-content { box-sizing: border-box; min-height: 720px; padding: 2rem;
  background-color: var(--slide-bg, transparent); color: var(--slide-color, inherit);
  background-image: var(--slide-bgimg, none); background-size: cover;
  background-position: center; }
.deck-slide-content table { border-collapse: collapse; }
.deck-slide-content th, .deck-slide-content td { border: 1px solid #ccc; padding: 0.4em 0.8em; }
.centered { display: flex; flex-direction: column; justify-content: center;
  align-items: center; text-align: center; }
.size-large h1 { font-size: 3rem; } .size-large h2 { font-size: 2.25rem; }
.size-huge h1 { font-size: 4.5rem; } .size-huge h2 { font-size: 3rem; }
.size-massive h1 { font-size: 6rem; } .size-massive h2 { font-size: 4rem; }
.text-small { font-size: 0.875rem; }
.text-medium { font-size: 1.125rem; }
.text-large { font-size: 1.5rem; }
.transition-fade { animation: deck-fade 0.5s ease-in; }
.transition-slide { animation: deck-slide 0.5s ease-out; }
.transition-zoom { animation: deck-zoom 0.5s ease-out; }
@keyframes deck-fade { from { opacity: 0; } to { opacity: 1; } }
@keyframes deck-slide { from { transform: translateX(8%); opacity: 0; } to { transform: none; opacity: 1; } }
@keyframes deck-zoom { from { transform: scale(0.9); opacity: 0; } to { transform: none; opacity: 1; } }
figure { margin: 1rem 0; }
figure img { max-width: 100%; }
figure figcaption { font-size: 0.875em; opacity: 0.8; }
.img-left { text-align: left; }
.img-right { text-align: right; }
.img-center { text-align: center; }
"""


@dataclass
class RenderedSlide:
    index: int
    html: str
    config: RenderConfig


def _unwrap_images(state: StateCore) -> None:
    """Hide the ``<p>`` around paragraphs that hold nothing but images."""
    tokens = state.tokens
    for i in range(len(tokens) - 2):
        if tokens[i].type != "paragraph_open" or tokens[i + 2].type != "paragraph_close":
            continue
        children = tokens[i + 1].children or []
        if not any(child.type == "image" for child in children):
            continue
        if all(
            child.type in _UNWRAP_ALLOWED
            or (child.type == "text" and not child.content.strip())
            for child in children
        ):
            tokens[i].hidden = True
            tokens[i + 2].hidden = True


def _render_image(self, tokens, idx, options, env):
    token = tokens[idx]
    config: RenderConfig = env.get("render_config") or to_render_config({})
    alt = self.renderInlineAsText(token.children or [], options, env)
    return config.wrap_image(
        token.attrGet("src") or "",
        alt,
        token.attrGet("title"),
    )


def create_markdown() -> MarkdownIt:
    """Commonmark with GFM tables, strikethrough and task lists.

    Raw HTML is disabled so slide bodies can never inject markup.
    """
    md = (
        MarkdownIt("commonmark", {"html": False})
        .enable(["table", "strikethrough"])
        .use(tasklists_plugin)
    )
    md.core.ruler.push("unwrap_images", _unwrap_images)
    md.add_render_rule("image", _render_image)
    return md


class SlideRenderer:
    """Renders slides of a deck; the option cascade is resolved per call."""

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self.md = md or create_markdown()

    def render_body(self, body: str, config: RenderConfig) -> str:
        return self.md.render(body, {"render_config": config})

    def _slide_div(self, slide: Slide, config: RenderConfig) -> str:
        style = style_attribute(config.style_vars)
        style_attr = f' style="{html.escape(style)}"' if style else ""
        return (
            f'<div class="{html.escape(config.class_name)}"{style_attr}>\n'
            f"{self.render_body(slide.body, config)}"
            "</div>"
        )

    def render_slide(self, slide: Slide, deck: Deck) -> RenderedSlide:
        config = to_render_config(resolve_options(slide, deck))
        parts = []
        if config.font_resource is not None:
            parts.append(_font_link(config.font_resource.url))
        parts.append(self._slide_div(slide, config))

        logger.debug("Rendered slide %d: classes=%s", slide.index, config.classes)
        return RenderedSlide(index=slide.index, html="\n".join(parts), config=config)

    def render_deck(self, deck: Deck, title: str = "Slides", slide: int | None = None) -> str:
        """Render *deck* as a standalone HTML document.

        With *slide* (1-based) only that slide is included.
        """
        slides = deck.slides
        if slide is not None:
            slides = [s for s in deck.slides if s.index == slide]
            if not slides:
                raise IndexError(f"Slide {slide} out of range (deck has {len(deck)} slides)")

        font_links: list[str] = []
        sections: list[str] = []
        for s in slides:
            config = to_render_config(resolve_options(s, deck))
            if config.font_resource is not None:
                link = _font_link(config.font_resource.url)
                if link not in font_links:
                    font_links.append(link)
            sections.append(
                f'<section class="slide" id="slide-{s.index}" data-slide="{s.index}">\n'
                f"{self._slide_div(s, config)}\n</section>"
            )

        logger.info("Rendered %d of %d slide(s)", len(sections), len(deck))
        head = "\n".join(
            [
                '<meta charset="utf-8" />',
                f"<title>{html.escape(title)}</title>",
                *font_links,
                f"<style>\n{DECK_STYLESHEET}</style>",
            ]
        )
        body = "\n".join(sections)
        return f"<!DOCTYPE html>\n<html>\n<head>\n{head}\n</head>\n<body>\n{body}\n</body>\n</html>\n"


def _font_link(url: str) -> str:
    return f'<link href="{html.escape(url)}" rel="stylesheet" />'
