import json
import logging

from siglab import config
from siglab.config import validate_config
from siglab.logging_config import (
    StructuredFormatter,
    SimulationAuditLogger,
    get_run_id,
    run_id_var,
    set_run_id,
)


def test_set_run_id_generates_uuid():
    token = run_id_var.set("")
    try:
        run_id = set_run_id()
        assert len(run_id) == 36
        assert get_run_id() == run_id
        assert set_run_id("fixed") == "fixed"
    finally:
        run_id_var.reset(token)


def test_structured_formatter_includes_run_and_extra_fields():
    token = run_id_var.set("run-123")
    try:
        record = logging.LogRecord("siglab.test", logging.INFO, __file__, 1, "hello", (), None)
        record.extra_fields = {"event_type": "RUN_STARTED"}
        doc = json.loads(StructuredFormatter().format(record))
    finally:
        run_id_var.reset(token)
    assert doc["message"] == "hello"
    assert doc["level"] == "INFO"
    assert doc["run_id"] == "run-123"
    assert doc["event_type"] == "RUN_STARTED"


def test_audit_event_carries_fields(caplog):
    audit = SimulationAuditLogger("siglab.audit.test")
    with caplog.at_level(logging.WARNING, logger="siglab.audit.test"):
        audit.attack_applied("swap_key", "VERIFYING")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.extra_fields["event_type"] == "ATTACK_APPLIED"
    assert record.extra_fields["attack"] == "swap_key"
    assert record.extra_fields["stage"] == "VERIFYING"


def test_run_failed_attaches_exception(caplog):
    audit = SimulationAuditLogger("siglab.audit.test")
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        error = e
    with caplog.at_level(logging.ERROR, logger="siglab.audit.test"):
        audit.run_failed("SIGNING", "boom", error)
    record = caplog.records[-1]
    assert record.exc_info[1] is error
    assert record.extra_fields["stage"] == "SIGNING"


def test_default_config_is_valid():
    assert all(validate_config().values())


def test_production_flag_follows_env(monkeypatch):
    monkeypatch.setattr(config, "ENV", "prod")
    assert config.is_production() is True
    monkeypatch.setattr(config, "ENV", "dev")
    assert config.is_production() is False
