"""
Extractor configuration: thresholds and feature flags configurable at runtime.

Load order:
  1. Built-in defaults.
  2. JSON config file (if ``SHIPMAIL_CONFIG_FILE`` env var is set).
  3. Individual environment variable overrides (``SHIPMAIL_*`` prefix).
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Extractor version: bump on every pattern change
# ---------------------------------------------------------------------------
EXTRACTOR_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# ExtractorConfig
# ---------------------------------------------------------------------------


@dataclass
class ExtractorConfig:
    """All runtime-tunable parameters for the email extractors."""

    # --- Pattern thresholds ---
    order_number_min_digits: int = 5
    """Minimum digit run accepted from an element whose class mentions 'order'."""

    tracking_link_min_digits: int = 10
    """Minimum digit run accepted from a tracking link target."""

    label_gap_max_chars: int = 200
    """Maximum non-digit characters allowed between a tracking label and its number."""

    # --- Input guards ---
    max_body_chars: int = 500_000
    """Decoded bodies longer than this are truncated before parsing."""

    html_parser: str = "html.parser"
    """BeautifulSoup tree builder."""

    # --- Order matching ---
    name_match_min_part_length: int = 3
    """Name parts shorter than this never produce a partial match."""

    # --- Fulfillment defaults ---
    default_carrier: str = "Other"
    notify_customer: bool = False

    # --- Feature flags: matchers ---
    # True = enabled; unknown matcher names default to enabled
    matchers_enabled: Dict[str, bool] = field(
        default_factory=lambda: {
            "subject_parenthesized": True,
            "body_order_label": True,
            "order_class_element": True,
            "usps_text": True,
            "ups_text": True,
            "tracking_link": True,
            "billing_address": True,
            "dear_greeting": True,
            "thank_you_greeting": True,
        }
    )

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """Build config from environment variables, falling back to defaults."""
        cfg = cls()

        config_file = os.environ.get("SHIPMAIL_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                try:
                    raw = json.loads(path.read_text(encoding="utf-8"))
                    cfg = cls(**{k: v for k, v in raw.items() if k in cls.__dataclass_fields__})
                    logger.info("Loaded extractor config from %s", path)
                except (OSError, ValueError, TypeError) as exc:
                    logger.warning("Failed to load config file %s: %s", path, exc)
            else:
                logger.warning("Config file %s does not exist; using defaults", path)

        _apply_env_overrides(cfg)
        return cfg

    @classmethod
    def default(cls) -> "ExtractorConfig":
        """Return a fresh config with all defaults (convenience alias)."""
        return cls()

    def is_matcher_enabled(self, name: str) -> bool:
        """Return True if the named matcher is enabled (defaults to True for unknown names)."""
        return self.matchers_enabled.get(name, True)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(cfg: ExtractorConfig) -> None:
    """Apply individual SHIPMAIL_* environment variable overrides to *cfg* in-place."""
    bool_map = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}

    def _getenv_int(key: str) -> Optional[int]:
        v = os.environ.get(key)
        return int(v) if v is not None else None

    def _getenv_bool(key: str) -> Optional[bool]:
        v = os.environ.get(key, "").lower()
        return bool_map.get(v)

    for attr, env_key in [
        ("order_number_min_digits", "SHIPMAIL_ORDER_MIN_DIGITS"),
        ("tracking_link_min_digits", "SHIPMAIL_LINK_MIN_DIGITS"),
        ("label_gap_max_chars", "SHIPMAIL_LABEL_GAP"),
        ("max_body_chars", "SHIPMAIL_MAX_BODY_CHARS"),
        ("name_match_min_part_length", "SHIPMAIL_NAME_MIN_PART"),
    ]:
        val = _getenv_int(env_key)
        if val is not None:
            setattr(cfg, attr, val)

    for attr, env_key in [
        ("html_parser", "SHIPMAIL_HTML_PARSER"),
        ("default_carrier", "SHIPMAIL_DEFAULT_CARRIER"),
    ]:
        val = os.environ.get(env_key)
        if val:
            setattr(cfg, attr, val)

    notify = _getenv_bool("SHIPMAIL_NOTIFY_CUSTOMER")
    if notify is not None:
        cfg.notify_customer = notify
