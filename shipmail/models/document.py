"""
EmailDocument: the uniform view of one email consumed by every extractor.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class EmailDocument:
    """A decoded email: subject, body (markup preserved) and headers."""

    subject: str = ""

    body: str = ""
    """Decoded body. HTML markup is kept for structural queries."""

    headers: Dict[str, str] = field(default_factory=dict)
    """Lowercased header name → value."""

    plain_text: Optional[str] = None
    """Markup-stripped rendering of *body*; derived when not supplied."""

    message_id: Optional[str] = None
    thread_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.subject is None:
            object.__setattr__(self, "subject", "")
        if self.body is None:
            object.__setattr__(self, "body", "")
        if self.plain_text is None:
            from shipmail.extraction.text_render import render_plain_text

            object.__setattr__(self, "plain_text", render_plain_text(self.body))

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    @property
    def has_body(self) -> bool:
        return bool(self.body and self.body.strip())

    @property
    def date(self) -> Optional[str]:
        return self.headers.get("date")

    @property
    def sender(self) -> Optional[str]:
        return self.headers.get("from")

    # ------------------------------------------------------------------
    # Construction / serialisation
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], html_parser: str = "html.parser"
    ) -> "EmailDocument":
        """
        Build a document from a loose mapping (``subject``, ``body``,
        ``headers``, ``id``, ``threadId``). Unknown keys are ignored and an
        empty mapping yields an empty document. *html_parser* renders
        ``plain_text`` from the body.
        """
        from shipmail.extraction.text_render import render_plain_text

        headers = data.get("headers") or {}
        if not isinstance(headers, Mapping):
            headers = {}
        subject = data.get("subject")
        body = data.get("body")
        body = body if isinstance(body, str) else ""
        return cls(
            subject=subject if isinstance(subject, str) else "",
            body=body,
            plain_text=render_plain_text(body, html_parser),
            headers={str(k).lower(): str(v) for k, v in headers.items()},
            message_id=data.get("id"),
            thread_id=data.get("threadId", data.get("thread_id")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.message_id,
            "thread_id": self.thread_id,
            "subject": self.subject,
            "body": self.body,
            "headers": dict(self.headers),
        }

    def __repr__(self) -> str:
        return (
            f"EmailDocument(id={self.message_id!r}, subject={self.subject!r},"
            f" body_chars={len(self.body)})"
        )
