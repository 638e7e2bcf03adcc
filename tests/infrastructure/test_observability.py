"""Structured Logging — JSON formatter output and root handler setup."""

import json
import logging
from decimal import Decimal

from car_registry.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "car_registry.test", logging.INFO, __file__, 1, "hello %s", ("cars",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "car_registry.test"
    assert log["message"] == "hello cars"


def test_json_formatter_surfaces_extras():
    log = json.loads(JSONFormatter().format(_record(car_id=4, version=2, error_code="NOT_FOUND")))
    assert log["car_id"] == 4
    assert log["version"] == 2
    assert log["error_code"] == "NOT_FOUND"
    assert "criteria" not in log


def test_json_formatter_serializes_criteria_and_request_fields():
    record = _record(
        criteria={"price": Decimal("45000.00")}, method="GET", path="/api/v1/cars",
    )
    log = json.loads(JSONFormatter().format(record))
    assert log["criteria"] == {"price": "45000.00"}
    assert log["method"] == "GET"
    assert log["path"] == "/api/v1/cars"


def test_setup_logging_replaces_root_handlers():
    saved_handlers, saved_level = list(logging.root.handlers), logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("DEBUG", "json")
        assert len(logging.root.handlers) == 1
        assert isinstance(logging.root.handlers[0].formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG
    finally:
        logging.root.handlers[:] = saved_handlers
        logging.root.setLevel(saved_level)
