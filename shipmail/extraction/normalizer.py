"""
Email Content Normalizer.

Turns a raw mailbox envelope into an :class:`EmailDocument`:

  Step 1. Envelope validation (pydantic); malformed → ``None``
  Step 2. Header map: lowercased names, last duplicate wins
  Step 3. Body selection: top-level body data, else the first ``text/html``
          part, else the first ``text/plain`` part, else ``""``
  Step 4. base64url → UTF-8 decoding; failure → ``""``
  Step 5. Plain-text rendering for free-text matching

Nothing in this module raises for bad input: a structural anomaly yields
``None`` and a decoding failure yields an empty body.
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, Iterator, List, Optional

from shipmail.config import ExtractorConfig
from shipmail.extraction.input_validator import EnvelopeValidationError, validate_envelope
from shipmail.extraction.text_render import render_plain_text
from shipmail.models.document import EmailDocument
from shipmail.models.envelope import EnvelopeHeader, EnvelopePart, EnvelopePayload
from shipmail.observability.metrics import NORMALIZER_RESULTS_TOTAL, timer

logger = logging.getLogger(__name__)

HTML_MIME_TYPE = "text/html"
PLAIN_MIME_TYPE = "text/plain"


def normalize_envelope(
    raw: Any,
    config: Optional[ExtractorConfig] = None,
) -> Optional[EmailDocument]:
    """
    Build an :class:`EmailDocument` from a raw mailbox envelope.

    Args:
        raw:    The mailbox message (``{id, threadId, payload: {...}}``).
        config: Optional :class:`~shipmail.config.ExtractorConfig`.

    Returns:
        The normalised document, or ``None`` when the envelope is missing or
        structurally malformed.
    """
    if config is None:
        config = ExtractorConfig.default()

    if raw is None:
        logger.warning("No envelope provided")
        NORMALIZER_RESULTS_TOTAL.labels(outcome="malformed").inc()
        return None

    try:
        envelope = validate_envelope(raw)
    except EnvelopeValidationError as exc:
        logger.warning("Malformed envelope: %s", exc)
        NORMALIZER_RESULTS_TOTAL.labels(outcome="malformed").inc()
        return None

    with timer("normalize_envelope"):
        headers = build_header_map(envelope.payload.headers)
        body, decoded = _select_body(envelope.payload)

        if len(body) > config.max_body_chars:
            logger.warning(
                "Body of message %s truncated from %d to %d chars",
                envelope.id, len(body), config.max_body_chars,
            )
            body = body[: config.max_body_chars]

        document = EmailDocument(
            subject=headers.get("subject", ""),
            body=body,
            headers=headers,
            plain_text=render_plain_text(body, config.html_parser),
            message_id=envelope.id,
            thread_id=envelope.thread_id,
        )

    NORMALIZER_RESULTS_TOTAL.labels(outcome="ok" if decoded else "decode_error").inc()
    return document


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_header_map(headers: List[EnvelopeHeader]) -> Dict[str, str]:
    """Return a lowercased name → value map; the last duplicate wins."""
    result: Dict[str, str] = {}
    for header in headers:
        result[header.name.lower()] = header.value or ""
    return result


def decode_body_data(data: Optional[str]) -> Optional[str]:
    """
    Decode base64url body data to UTF-8 text.

    Returns ``""`` for absent data and ``None`` when decoding fails.
    """
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        logger.warning("Could not decode body data: %s", exc)
        return None


def _walk_parts(parts: Optional[List[EnvelopePart]]) -> Iterator[EnvelopePart]:
    """Yield parts depth-first in document order (nested multiparts included)."""
    for part in parts or []:
        yield part
        yield from _walk_parts(part.parts)


def _select_body(payload: EnvelopePayload) -> tuple[str, bool]:
    """
    Pick and decode the body.

    Returns:
        ``(body, decoded_ok)``; a decoding failure yields ``("", False)``.
    """
    if payload.body.data:
        decoded = decode_body_data(payload.body.data)
        return (decoded, True) if decoded is not None else ("", False)

    candidates = list(_walk_parts(payload.parts))
    failed = False
    for mime_type in (HTML_MIME_TYPE, PLAIN_MIME_TYPE):
        part = next(
            (p for p in candidates if p.mime_type.lower() == mime_type and p.body.data),
            None,
        )
        if part is None:
            continue
        decoded = decode_body_data(part.body.data)
        if decoded:
            return decoded, True
        if decoded is None:
            failed = True

    return "", not failed
