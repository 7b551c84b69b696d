"""Load deck markdown from inline parameters, local files, GitHub or HackMD."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote, urlencode

import requests

from .detect import detect_source, looks_like_markdown

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1024 * 1024  # 1 MiB
GITHUB_RAW_BASE = "https://raw.githubusercontent.com"
GITHUB_API_BASE = "https://api.github.com"
HACKMD_BASE = "https://hackmd.io"
DEFAULT_TIMEOUT = 10.0

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_GITHUB_BLOB_RE = re.compile(r"https://github\.com/([^/]+)/([^/]+)/blob/([^/]+)/(.+\.md)")
_HACKMD_PATTERNS = [
    re.compile(r"https://hackmd\.io/(@[^/]+/[^/?#]+)"),
    re.compile(r"https://hackmd\.io/([a-zA-Z0-9_-]+)"),
    re.compile(r"^([a-zA-Z0-9_-]+)$"),
]


class DeckLoadError(RuntimeError):
    """Raised when deck content cannot be loaded from its source."""


@dataclass
class DeckSource:
    content: str
    source: str


def _check_content(content: str, source: str) -> str:
    size = len(content.encode("utf-8"))
    if size > MAX_FILE_SIZE:
        raise DeckLoadError(
            f"{source}: file too large ({size} bytes). Maximum size is {MAX_FILE_SIZE // 1024}KB"
        )
    if not looks_like_markdown(content):
        raise DeckLoadError(f"{source}: content does not appear to be valid markdown")
    return content


def load_from_base64(data: str) -> DeckSource:
    cleaned = re.sub(r"\s+", "", data)
    if not _BASE64_RE.match(cleaned):
        raise DeckLoadError("base64: invalid base64 string")
    try:
        content = base64.b64decode(cleaned, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise DeckLoadError(f"base64: decode failed: {exc}") from exc
    logger.debug("Decoded base64 deck: %d chars", len(content))
    return DeckSource(_check_content(content, "base64"), "base64")


def load_from_url_param(data: str) -> DeckSource:
    """Decode markdown passed inline as a percent-encoded ``url:`` parameter."""
    content = unquote(data)
    return DeckSource(_check_content(content, "url"), "url")


def load_from_file(path: str) -> DeckSource:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeckLoadError(f"{path}: {exc}") from exc
    return DeckSource(_check_content(content, path), f"file:{path}")


def load_from_github(path: str, timeout: float = DEFAULT_TIMEOUT) -> DeckSource:
    """Fetch ``user/repo/branch/path/to/file.md`` from GitHub.

    Tries raw.githubusercontent.com first and falls back to the contents API.
    """
    parts = path.split("/")
    if len(parts) < 4:
        raise DeckLoadError(
            "github: invalid path format. Use: user/repo/branch/path/to/file.md"
        )
    user, repo, branch, *file_parts = parts
    file_path = "/".join(file_parts)
    if not file_path.endswith(".md"):
        raise DeckLoadError("github: file must be a markdown file (.md)")

    source = f"github:{user}/{repo}/{branch}/{file_path}"
    raw_url = f"{GITHUB_RAW_BASE}/{user}/{repo}/{branch}/{file_path}"
    try:
        logger.debug("Fetching %s", raw_url)
        response = requests.get(raw_url, headers={"Accept": "text/plain"}, timeout=timeout)
        response.raise_for_status()
        return DeckSource(_check_content(response.text, source), source)
    except requests.exceptions.RequestException as exc:
        logger.warning("Raw GitHub content failed (%s), trying API", exc)

    api_url = f"{GITHUB_API_BASE}/repos/{user}/{repo}/contents/{file_path}"
    try:
        response = requests.get(
            api_url,
            params={"ref": branch},
            headers={"Accept": "application/vnd.github.v3+json"},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as exc:
        raise DeckLoadError(f"{source}: GitHub API error: {exc}") from exc
    except ValueError as exc:
        raise DeckLoadError(f"{source}: GitHub API returned invalid JSON") from exc

    if data.get("type") != "file":
        raise DeckLoadError(f"{source}: GitHub path does not point to a file")
    try:
        content = base64.b64decode(data.get("content", "")).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise DeckLoadError(f"{source}: could not decode GitHub content") from exc
    return DeckSource(_check_content(content, source), source)


def load_from_hackmd(note_id: str, timeout: float = DEFAULT_TIMEOUT) -> DeckSource:
    source = f"hackmd:{note_id}"
    url = f"{HACKMD_BASE}/{note_id}/download"
    try:
        logger.debug("Fetching %s", url)
        response = requests.get(url, headers={"Accept": "text/plain"}, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as exc:
        raise DeckLoadError(f"{source}: HackMD fetch failed: {exc}") from exc
    return DeckSource(_check_content(response.text, source), source)


def load_deck(param: str, *, timeout: float = DEFAULT_TIMEOUT) -> DeckSource:
    """Load deck markdown for a deck parameter or local path.

    Accepted forms: ``base64:<data>``, ``url:<percent-encoded markdown>``,
    ``github:user/repo/branch/file.md``, ``hackmd:<note id>`` or a path.
    A single attempt is made per source; failures raise
    :class:`DeckLoadError`.
    """
    kind = detect_source(param)
    _, _, value = param.partition(":")
    if kind == "base64":
        result = load_from_base64(value)
    elif kind == "url":
        result = load_from_url_param(value)
    elif kind == "github":
        result = load_from_github(value, timeout=timeout)
    elif kind == "hackmd":
        result = load_from_hackmd(value, timeout=timeout)
    else:
        result = load_from_file(param)
    logger.info("Loaded deck from %s (%d chars)", result.source, len(result.content))
    return result


# ---------------------------------------------------------------------------
# Building deck parameters
# ---------------------------------------------------------------------------

def github_param_from_url(url: str) -> str:
    """``https://github.com/u/r/blob/main/deck.md`` -> ``github:u/r/main/deck.md``."""
    match = _GITHUB_BLOB_RE.search(url)
    if not match:
        raise ValueError(
            "Invalid GitHub URL format. Use a direct link to a markdown file "
            "(github.com/user/repo/blob/branch/file.md)"
        )
    user, repo, branch, file_path = match.groups()
    return f"github:{user}/{repo}/{branch}/{file_path}"


def hackmd_param_from_url(url: str) -> str:
    """Accepts ``hackmd.io/@user/note``, ``hackmd.io/<id>`` or a bare note id."""
    for pattern in _HACKMD_PATTERNS:
        match = pattern.search(url)
        if match:
            return f"hackmd:{match.group(1)}"
    raise ValueError(
        "Invalid HackMD URL format. Use a HackMD note URL "
        "(hackmd.io/@user/note or hackmd.io/note-id)"
    )


def encode_deck(content: str) -> str:
    return "base64:" + base64.b64encode(content.encode("utf-8")).decode("ascii")


def encode_url_param(content: str) -> str:
    """Percent-encode markdown for a ``url:`` deck parameter."""
    return "url:" + quote(content, safe="")


def shareable_url(content: str, base_url: str, slide: int = 0) -> str:
    """Viewer URL carrying the whole deck; *slide* is 0-based."""
    params = {"deck": encode_deck(content)}
    if slide > 0:
        params["slide"] = str(slide + 1)
    return f"{base_url}?{urlencode(params)}"
