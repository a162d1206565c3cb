"""
Ordered fallback chains.

Every extractor is an ordered list of named :class:`Matcher` steps evaluated
short-circuit: the first step returning a non-empty value wins. Steps can be
switched off individually through ``ExtractorConfig.matchers_enabled``.

A :class:`ParsedEmail` is built once per extractor call and carries the
lazily parsed HTML tree, so the steps share one parse without any state
outliving the call.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup

from shipmail.config import ExtractorConfig
from shipmail.extraction.html_query import parse_html
from shipmail.models.document import EmailDocument
from shipmail.observability.metrics import record_extraction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ParsedEmail:
    """Per-call view of an :class:`EmailDocument` with a lazily built tree."""

    def __init__(self, document: EmailDocument, config: ExtractorConfig) -> None:
        self.document = document
        self.config = config
        self._soup: Optional[BeautifulSoup] = None

    @property
    def subject(self) -> str:
        return self.document.subject

    @property
    def body(self) -> str:
        return self.document.body

    @property
    def plain_text(self) -> str:
        return self.document.plain_text or ""

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = parse_html(self.document.body, self.config.html_parser)
        return self._soup


@dataclass(frozen=True)
class Matcher(Generic[T]):
    """One named step of a fallback chain."""

    name: str
    func: Callable[[ParsedEmail], Optional[T]]
    needs_body: bool = True


@dataclass(frozen=True)
class ChainResult(Generic[T]):
    matcher: str
    value: T


def run_chain(
    matchers: Sequence[Matcher[T]],
    parsed: ParsedEmail,
) -> Optional[ChainResult[T]]:
    """Evaluate *matchers* in order; return the first non-empty result."""
    has_body = parsed.document.has_body
    for matcher in matchers:
        if not parsed.config.is_matcher_enabled(matcher.name):
            continue
        if matcher.needs_body and not has_body:
            continue
        value = matcher.func(parsed)
        if value:
            logger.debug("Matcher %s produced %r", matcher.name, value)
            return ChainResult(matcher=matcher.name, value=value)
    return None


def coerce_document(
    document: Any,
    extractor: str,
    config: Optional[ExtractorConfig] = None,
) -> Optional[EmailDocument]:
    """
    Accept an :class:`EmailDocument` or a loose mapping. A mapping body is
    rendered with the configured HTML parser.

    ``None`` and other types are a caller contract violation: logged at error
    severity and answered with ``None``.
    """
    if isinstance(document, EmailDocument):
        return document
    if isinstance(document, Mapping):
        parser = config.html_parser if config is not None else "html.parser"
        return EmailDocument.from_dict(document, parser)

    logger.error(
        "Invalid email content provided to %s: %s",
        extractor, type(document).__name__,
    )
    record_extraction(extractor, "invalid")
    return None


@lru_cache(maxsize=128)
def compile_pattern(pattern: str, flags: int = re.IGNORECASE) -> "re.Pattern[str]":
    """Compile and cache a pattern (patterns embed config thresholds)."""
    return re.compile(pattern, flags)


def search_group(pattern: "re.Pattern[str]", text: str, group: int = 1) -> Optional[str]:
    """Return *group* of the first match of *pattern* in *text*, if any."""
    if not text:
        return None
    match = pattern.search(text)
    if match and match.group(group):
        return match.group(group)
    return None
