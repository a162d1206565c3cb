"""
Unit tests for the order number extractor.
"""
import pytest

from shipmail.config import ExtractorConfig
from shipmail.extraction.order_number import (
    ORDER_NUMBER_MATCHERS,
    extract_order_number,
    order_number_from_subject,
)
from shipmail.models.document import EmailDocument


class TestSubjectPattern:

    def test_subject_scenario(self):
        doc = EmailDocument(subject="Your Order Has Been Updated (#12345)")
        assert extract_order_number(doc) == "12345"

    @pytest.mark.parametrize(
        "subject",
        [
            "(#987654)",
            "Shipped (#987654) today",
            "Re: Fwd: Your Countryside Pet Supply Order Has Been Updated (#987654)",
            "[store] (#987654) - thanks",
        ],
    )
    def test_digits_returned_regardless_of_surrounding_text(self, subject):
        assert order_number_from_subject(subject) == "987654"
        assert extract_order_number(EmailDocument(subject=subject)) == "987654"

    def test_first_parenthesized_group_wins(self):
        assert order_number_from_subject("(#111) and (#222)") == "111"

    def test_hash_without_parentheses_ignored(self):
        assert order_number_from_subject("Order #12345") is None

    def test_none_subject(self):
        assert order_number_from_subject(None) is None

    def test_subject_beats_body(self):
        doc = EmailDocument(subject="Updated (#11111)", body="<p>Order #22222</p>")
        assert extract_order_number(doc) == "11111"


class TestBodyFallbacks:

    def test_body_order_label(self):
        doc = EmailDocument(subject="Your order shipped", body="<p>Good news! Your order #54321 shipped.</p>")
        assert extract_order_number(doc) == "54321"

    def test_body_order_label_case_insensitive(self):
        doc = EmailDocument(subject="", body="ORDER #777")
        assert extract_order_number(doc) == "777"

    def test_body_label_split_across_elements(self):
        doc = EmailDocument(subject="", body="<p>Order #<span>24680</span></p>")
        assert extract_order_number(doc) == "24680"

    def test_order_class_element(self):
        body = '<div class="order-summary"><span>Reference</span> 1234567</div>'
        doc = EmailDocument(subject="Shipped", body=body)
        assert extract_order_number(doc) == "1234567"

    def test_order_class_element_needs_five_digits(self):
        body = '<div class="order-summary">Ref 1234</div>'
        assert extract_order_number(EmailDocument(subject="", body=body)) is None

    def test_order_class_threshold_configurable(self):
        body = '<div class="order-summary">Ref 1234</div>'
        cfg = ExtractorConfig(order_number_min_digits=4)
        assert extract_order_number(EmailDocument(subject="", body=body), cfg) == "1234"

    def test_order_class_substring_match(self):
        body = '<td class="customer-reorder-box">Ref 99999</td>'
        assert extract_order_number(EmailDocument(subject="", body=body)) == "99999"

    def test_label_beats_order_class(self):
        body = '<div class="order">55555</div><p>Order #66666</p>'
        assert extract_order_number(EmailDocument(subject="", body=body)) == "66666"

    def test_disabled_matcher_skipped(self):
        cfg = ExtractorConfig()
        cfg.matchers_enabled["subject_parenthesized"] = False
        doc = EmailDocument(subject="(#11111)", body="<p>Order #22222</p>")
        assert extract_order_number(doc, cfg) == "22222"


class TestMisses:

    def test_nothing_found_returns_none(self):
        doc = EmailDocument(subject="Hello", body="<p>No identifiers here.</p>")
        assert extract_order_number(doc) is None

    def test_empty_dict_returns_none(self):
        assert extract_order_number({}) is None

    def test_none_returns_none(self):
        assert extract_order_number(None) is None

    def test_invalid_type_returns_none(self):
        assert extract_order_number(12345) is None

    def test_empty_body_still_uses_subject(self):
        assert extract_order_number({"subject": "x (#42)", "body": ""}) == "42"

    def test_miss_logged_as_warning(self, caplog):
        with caplog.at_level("WARNING"):
            extract_order_number(EmailDocument(subject="nothing"))
        assert any(r.levelname == "WARNING" for r in caplog.records)

    def test_none_logged_as_error(self, caplog):
        with caplog.at_level("ERROR"):
            extract_order_number(None)
        assert any(r.levelname == "ERROR" for r in caplog.records)


class TestProperties:

    def test_idempotent(self, tracking_html):
        doc = EmailDocument(subject="Update", body=tracking_html)
        first = extract_order_number(doc)
        assert first == "12345"
        assert extract_order_number(doc) == first

    def test_matcher_order(self):
        assert [m.name for m in ORDER_NUMBER_MATCHERS] == [
            "subject_parenthesized",
            "body_order_label",
            "order_class_element",
        ]
