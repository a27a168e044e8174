"""Pruebas de configuración de logging. / Logging setup tests."""

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from urna.ledger import ElectionLedger
from urna.logging import bind_context, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def test_setup_logging_writes_json_file(tmp_path):
    logger = setup_logging("debug", tmp_path, json_logs=True)

    logger.info("ledger_probe", election_id="demo")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = tmp_path / "logs" / "urna.log"
    assert log_file.exists()
    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    record = json.loads(lines[-1])
    assert record["event"] == "ledger_probe"
    assert record["election_id"] == "demo"
    assert record["level"] == "info"
    assert "timestamp" in record


def test_setup_logging_filters_below_level(tmp_path):
    logger = setup_logging("WARNING", tmp_path)

    logger.info("hidden_event")
    logger.warning("visible_event")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = (tmp_path / "logs" / "urna.log").read_text(encoding="utf-8")
    assert "hidden_event" not in content
    assert "visible_event" in content


def test_bind_context_skips_empty_values():
    logger = bind_context(structlog.get_logger(), election_id="demo", caller=None, operation="vote")

    context = structlog.get_context(logger)
    assert context == {"election_id": "demo", "operation": "vote"}


def test_ledger_rejections_carry_call_context():
    structlog.reset_defaults()
    with capture_logs() as logs:
        ledger = ElectionLedger("0xowner", election_id="ctx-demo")
        ledger.register_candidate("0xoutsider", "A", "Party A", "Desc A")

    rejected = [entry for entry in logs if entry["event"] == "ledger_call_rejected"]
    assert len(rejected) == 1
    assert rejected[0]["election_id"] == "ctx-demo"
    assert rejected[0]["operation"] == "register_candidate"
    assert rejected[0]["caller"] == "0xoutsider"
    assert rejected[0]["kind"] == "unauthorized"
    assert rejected[0]["log_level"] == "warning"
