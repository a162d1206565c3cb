"""
Unit tests for envelope validation.
"""
import pytest

from shipmail.extraction.input_validator import EnvelopeValidationError, validate_envelope
from shipmail.models.envelope import RawEnvelope


_VALID_BASE = {
    "id": "msg-1",
    "threadId": "thr-1",
    "payload": {
        "headers": [{"name": "Subject", "value": "Hello (#1)"}],
        "body": {"data": "SGVsbG8"},
    },
}


class TestValidateEnvelopeHappyPath:

    def test_valid_envelope_returns_model(self):
        env = validate_envelope(_VALID_BASE)
        assert isinstance(env, RawEnvelope)
        assert env.thread_id == "thr-1"
        assert env.payload.headers[0].name == "Subject"

    def test_model_passes_through(self):
        env = validate_envelope(_VALID_BASE)
        assert validate_envelope(env) is env

    def test_extra_fields_ignored(self):
        raw = {**_VALID_BASE, "labelIds": ["UNREAD"], "snippet": "..."}
        env = validate_envelope(raw)
        assert not hasattr(env, "snippet")

    def test_ids_optional(self):
        env = validate_envelope({"payload": {}})
        assert env.id is None
        assert env.payload.headers == []
        assert env.payload.parts is None

    def test_part_mime_type_alias(self):
        raw = {"payload": {"parts": [{"mimeType": "text/html", "body": {"data": "eA"}}]}}
        env = validate_envelope(raw)
        assert env.payload.parts[0].mime_type == "text/html"


class TestValidateEnvelopeErrors:

    def test_missing_payload_raises(self):
        with pytest.raises(EnvelopeValidationError):
            validate_envelope({"id": "x"})

    def test_non_mapping_raises(self):
        with pytest.raises(EnvelopeValidationError):
            validate_envelope(["payload"])

    def test_header_without_name_raises(self):
        with pytest.raises(EnvelopeValidationError):
            validate_envelope({"payload": {"headers": [{"value": "v"}]}})

    def test_error_list_populated_on_failure(self):
        with pytest.raises(EnvelopeValidationError) as exc_info:
            validate_envelope({"payload": {"parts": "nope"}})
        assert len(exc_info.value.validation_errors) >= 1
        assert exc_info.value.validation_errors[0]["field"].startswith("payload")
