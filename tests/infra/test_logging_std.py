from __future__ import annotations

import json
import logging

import pytest

import smartstock.infra.logging_std as ls


def test_import_has_no_side_effect_handlers() -> None:
    root = logging.getLogger()
    # We don't assert it is empty (pytest may attach handlers), we assert we didn't ADD one.
    before = len(root.handlers)
    import importlib

    importlib.reload(ls)
    after = len(root.handlers)
    assert after == before


def test_configure_logging_idempotent() -> None:
    root = logging.getLogger()
    before = len(root.handlers)
    ls.configure_logging()
    after = len(root.handlers)
    # either unchanged (pytest already configured) or adds exactly 1 handler
    assert after == before or after == before + 1


def test_structured_formatter_emits_json_with_extra_data() -> None:
    record = logging.LogRecord(
        name="smartstock.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="forecast %s",
        args=("built",),
        exc_info=None,
    )
    record.extra_data = {"model": "ARIMA", "rows": 6}

    entry = json.loads(ls.StructuredFormatter().format(record))
    assert entry["message"] == "forecast built"
    assert entry["level"] == "INFO"
    assert entry["model"] == "ARIMA"
    assert entry["rows"] == 6


def test_log_kv_sorts_keys(caplog: pytest.LogCaptureFixture) -> None:
    logger = ls.get_logger("smartstock.test.kv")
    with caplog.at_level(logging.INFO, logger="smartstock.test.kv"):
        ls.log_kv(logger, "hello", b=2, a="x")
        ls.log_kv(logger, "plain")
    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["hello | a='x' b=2", "plain"]
    assert caplog.records[0].extra_data == {"b": 2, "a": "x"}
