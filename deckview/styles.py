"""Map resolved slide options to CSS classes, style variables and fonts."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from urllib.parse import quote_plus

from .models import IMAGE_POSITIONS, FontResource, OptionKey, RenderConfig

logger = logging.getLogger(__name__)

BASE_CLASS = "deck-slide-content"

GOOGLE_FONTS_URL = "https://fonts.googleapis.com/css2?family={family}:wght@400;700&display=swap"
FALLBACK_FONT_FAMILY = "sans-serif"

_IMAGE_CLASSES = {position: f"img-{position}" for position in IMAGE_POSITIONS}
DEFAULT_IMAGE_POSITION = "center"

# Values that switch an explicit ``center=...`` off.
_OFF_VALUES = {"false", "no", "off", "0"}

# Anything that could end a CSS value or open a new construct.
_UNSAFE_CSS_RE = re.compile(
    r"""[;{}<>"'\\\r\n]|/\*|expression\s*\(|javascript:|url\s*\(|@import""",
    re.IGNORECASE,
)
_URL_VAR_RE = re.compile(r"^url\('(.*)'\)$", re.DOTALL)
_SAFE_URL_RE = re.compile(r"^(?:https?://|(?![a-zA-Z][a-zA-Z0-9+.-]*:))[^\s'\"()\\<>]+$")


def _is_enabled(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() not in _OFF_VALUES


def font_resource(font: str) -> FontResource:
    """Build the stylesheet request for a font family.

    A ``+`` in the directive value stands for a space in the family name
    (directive values cannot contain whitespace).
    """
    family = font.replace("+", " ").strip()
    return FontResource(family=family, url=GOOGLE_FONTS_URL.format(family=quote_plus(family)))


def image_class(imgpos: str | bool | None) -> str:
    if isinstance(imgpos, str):
        return _IMAGE_CLASSES.get(imgpos, _IMAGE_CLASSES[DEFAULT_IMAGE_POSITION])
    return _IMAGE_CLASSES[DEFAULT_IMAGE_POSITION]


def to_render_config(resolved: Mapping[str, str | bool]) -> RenderConfig:
    """Map a resolved option set to a :class:`RenderConfig`.

    Unknown keys are ignored.  Unknown values for ``size``, ``body`` and
    ``transition`` are passed through into the class name as-is.
    """
    classes = [BASE_CLASS]
    style_vars: dict[str, str] = {}
    font: FontResource | None = None

    for key in OptionKey:
        if key.value not in resolved:
            continue
        value = resolved[key.value]

        if key is OptionKey.CENTER:
            if _is_enabled(value):
                classes.append("centered")
        elif key is OptionKey.IMGPOS:
            continue
        elif isinstance(value, bool) or not value.strip():
            # A bare "size" flag or an empty "font=" carries no value to map.
            logger.debug("Option %s given without a value, ignoring", key.value)
        elif key is OptionKey.SIZE:
            classes.append(f"size-{value}")
        elif key is OptionKey.BODY:
            classes.append(f"text-{value}")
        elif key is OptionKey.TRANSITION:
            classes.append(f"transition-{value}")
        elif key is OptionKey.BG:
            style_vars["--slide-bg"] = value
        elif key is OptionKey.COLOR:
            style_vars["--slide-color"] = value
        elif key is OptionKey.BGIMG:
            style_vars["--slide-bgimg"] = f"url('{value}')"
        elif key is OptionKey.FONT:
            font = font_resource(value)
            if not font.family:
                font = None
                continue
            style_vars["font-family"] = f"'{font.family}', {FALLBACK_FONT_FAMILY}"

    return RenderConfig(
        classes=tuple(classes),
        style_vars=style_vars,
        font_resource=font,
        img_wrap_class=image_class(resolved.get(OptionKey.IMGPOS.value)),
    )


# ---------------------------------------------------------------------------
# Inline style serialisation
# ---------------------------------------------------------------------------

def is_safe_css_value(value: str) -> bool:
    """True when *value* cannot escape a single CSS declaration value."""
    return bool(value.strip()) and _UNSAFE_CSS_RE.search(value) is None


def is_safe_url(url: str) -> bool:
    """True for relative URLs and http(s) URLs free of quoting characters."""
    return _SAFE_URL_RE.match(url) is not None


def _is_safe_declaration(name: str, value: str) -> bool:
    url_match = _URL_VAR_RE.match(value)
    if url_match:
        return is_safe_url(url_match.group(1))
    if name == "font-family":
        # The family is quoted by us; the name inside must not close the quote.
        family = value.rsplit(",", 1)[0].strip()[1:-1]
        return is_safe_css_value(family)
    return is_safe_css_value(value)


def style_attribute(style_vars: Mapping[str, str]) -> str:
    """Serialise style variables for an inline ``style`` attribute.

    Declarations carrying untrusted values that could break out of the
    property value are dropped and logged.
    """
    declarations = []
    for name, value in style_vars.items():
        if not _is_safe_declaration(name, value):
            logger.warning("Dropping unsafe style value for %s: %r", name, value)
            continue
        declarations.append(f"{name}: {value}")
    return "; ".join(declarations)
