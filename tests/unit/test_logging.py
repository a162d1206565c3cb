"""
Unit tests for the workflow event log.
"""
import json
import logging

from shipmail.observability.logging import EventFormatter, ExtractionLogger, get_logger


def _record(**extra):
    record = logging.LogRecord("shipmail.events", logging.WARNING, __file__, 1, "extraction_miss", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestEventFormatter:

    def test_single_json_line(self):
        line = EventFormatter().format(_record(message_id="m1", thread_id="t1", ctx_step="tracking"))
        event = json.loads(line)
        assert "\n" not in line
        assert event["event"] == "extraction_miss"
        assert event["level"] == "WARNING"
        assert event["message_id"] == "m1"
        assert event["ctx_step"] == "tracking"

    def test_unrelated_attributes_left_out(self):
        event = json.loads(EventFormatter().format(_record(secret="x")))
        assert "secret" not in event
        assert "pathname" not in event


class TestExtractionLogger:

    def test_miss_carries_ids(self, caplog):
        log = ExtractionLogger("m1", "t1", logger=logging.getLogger("tests.events"))
        with caplog.at_level("WARNING", logger="tests.events"):
            log.log_miss("customer_name", "customer_name_not_found")
        record = caplog.records[-1]
        assert record.levelname == "WARNING"
        assert record.message_id == "m1"
        assert record.thread_id == "t1"
        assert record.ctx_step == "customer_name"
        assert record.ctx_reason == "customer_name_not_found"

    def test_processed_event(self, caplog):
        log = ExtractionLogger("m2", None, logger=logging.getLogger("tests.events"))
        with caplog.at_level("INFO", logger="tests.events"):
            log.log_processed("12345", "John Smith", 2)
        record = caplog.records[-1]
        assert record.getMessage() == "tracking_email_processed"
        assert record.order_number == "12345"
        assert record.ctx_matching_orders == 2
        assert record.message_id == "m2"

    def test_default_logger_configured_once(self):
        first = get_logger()
        assert get_logger() is first
        assert len(first.handlers) == 1
        assert ExtractionLogger("m", "t").logger is first
