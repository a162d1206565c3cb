"""
Plain-text rendering of email bodies.

HTML bodies are flattened with a newline between text nodes, then a soft,
deterministic normalisation is applied so free-text patterns see stable
whitespace.

Transformations (in order):
  1. Unicode NFKC normalisation (non-breaking spaces, full-width digits, ...)
  2. Collapse repeated inline whitespace (spaces, tabs) to a single space
  3. Strip every line
  4. Collapse 3+ consecutive newlines to a double newline
  5. Strip leading/trailing whitespace
"""
from __future__ import annotations

import re
import unicodedata

from bs4 import BeautifulSoup

_MULTI_SPACES_RE = re.compile(r"[ \t\r\f\v]+")
_MULTI_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Apply soft whitespace/Unicode normalisation to already de-HTML'd text."""
    current = unicodedata.normalize("NFKC", text)
    current = _MULTI_SPACES_RE.sub(" ", current)
    current = "\n".join(line.strip() for line in current.split("\n"))
    current = _MULTI_NEWLINES_RE.sub("\n\n", current)
    return current.strip()


def element_text(element) -> str:
    """Flatten a parsed element (or whole tree) into normalised plain text."""
    return normalize_text(element.get_text(separator="\n"))


def render_plain_text(markup: str, parser: str = "html.parser") -> str:
    """
    Render an HTML or plain-text body as normalised plain text.

    Script and style contents are dropped. An empty body renders as ``""``.
    """
    if not markup:
        return ""
    soup = BeautifulSoup(markup, parser)
    for tag in soup(["script", "style"]):
        tag.decompose()
    return element_text(soup)
