"""Unit tests for core infrastructure components."""

import json
import pytest
import yaml
from decimal import Decimal
from ledger_audit.constants import ComplianceMode
from ledger_audit.utils.config_loader import (
    load_config,
    save_config,
    get_mode_config,
    build_analysis_config,
    get_reconciliation_tolerance,
)
from ledger_audit.utils.errors import (
    LedgerAuditError,
    ConfigurationError,
    RecordValidationError,
    ReconciliationError,
)
from ledger_audit.utils.logging import get_logger, log_context, JSONFormatter


def test_load_default_config():
    """Test that the bundled rules file loads (path from LEDGER_AUDIT_CONFIG)."""
    config = load_config()

    assert config['version'] == "1.0"
    assert config['thresholds']['large_transaction_threshold'] == 1000
    assert set(config['compliance_modes']) == {'basic', 'standard', 'strict'}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "nope.yaml"))


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("thresholds: [unclosed")

    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_load_config_missing_keys(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("version: '1.0'\n")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(path))

    assert 'thresholds' in str(exc_info.value)


def test_load_config_env_override(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    save_config(str(path), {
        'version': '2.0',
        'thresholds': {'large_transaction_threshold': 250},
        'compliance_modes': {'standard': {}}
    })
    monkeypatch.setenv("LEDGER_AUDIT_CONFIG", str(path))

    assert load_config()['version'] == '2.0'


def test_save_config_round_trip(tmp_path):
    path = tmp_path / "nested" / "rules.yaml"
    config = load_config()

    save_config(str(path), config)

    assert yaml.safe_load(path.read_text()) == config


def test_get_mode_config_falls_back_to_standard():
    config = {'compliance_modes': {'standard': {'velocity_alert_minutes': 45}}}

    assert get_mode_config(config, 'strict') == {'velocity_alert_minutes': 45}
    assert get_mode_config({}, 'strict') == {}


def test_build_analysis_config_modes():
    config = load_config()

    standard = build_analysis_config(config)
    assert standard.compliance_mode == ComplianceMode.STANDARD
    assert standard.large_transaction_threshold == 1000
    assert standard.velocity_alert_minutes == 30

    strict = build_analysis_config(config, 'strict')
    assert strict.large_transaction_threshold == 500
    assert strict.velocity_alert_minutes == 60

    basic = build_analysis_config(config, 'basic')
    assert basic.large_transaction_threshold == 5000


def test_build_analysis_config_rejects_unknown_mode():
    with pytest.raises(ConfigurationError):
        build_analysis_config(load_config(), 'paranoid')


def test_build_analysis_config_rejects_bad_thresholds():
    config = {
        'version': '1.0',
        'thresholds': {'large_transaction_threshold': -1},
        'compliance_modes': {}
    }

    with pytest.raises(ConfigurationError):
        build_analysis_config(config)


def test_analysis_config_is_immutable():
    config = build_analysis_config(load_config())

    with pytest.raises(Exception):
        config.large_transaction_threshold = 1


def test_reconciliation_tolerance():
    assert get_reconciliation_tolerance(load_config()) == 0.01
    assert get_reconciliation_tolerance({}) == 0.01


def test_error_hierarchy():
    for error_class in (ConfigurationError, RecordValidationError):
        assert issubclass(error_class, LedgerAuditError)

    error = ReconciliationError("7", Decimal("600"), Decimal("650"))
    assert isinstance(error, LedgerAuditError)
    assert error.supplier_id == "7"
    assert "650" in str(error)


def test_structured_logger_emits_json(caplog):
    logger = get_logger("tests.structured")

    with caplog.at_level("INFO", logger="tests.structured"):
        logger.info("Ledger built", supplier_id="7", closing=Decimal("600"))

    record = caplog.records[-1]
    assert record.getMessage() == "Ledger built"
    assert record.fields == {'supplier_id': "7", 'closing': Decimal("600")}

    payload = json.loads(JSONFormatter().format(record))
    assert payload['message'] == "Ledger built"
    assert payload['level'] == "INFO"
    assert payload['supplier_id'] == "7"
    assert payload['closing'] == "600"


def test_log_context_fields_are_merged(caplog):
    logger = get_logger("tests.context")

    with caplog.at_level("INFO", logger="tests.context"):
        with log_context(analysis_run_id="run-1"):
            with log_context(supplier_id="7"):
                logger.warning("Balance discrepancy", difference="-50")
                inner = JSONFormatter().format(caplog.records[-1])
            logger.info("Outer step")
            outer = JSONFormatter().format(caplog.records[-1])

    inner_payload = json.loads(inner)
    assert inner_payload['analysis_run_id'] == "run-1"
    assert inner_payload['supplier_id'] == "7"
    assert inner_payload['difference'] == "-50"

    outer_payload = json.loads(outer)
    assert outer_payload['analysis_run_id'] == "run-1"
    assert 'supplier_id' not in outer_payload


def test_logger_exception_includes_traceback(caplog):
    logger = get_logger("tests.exception")

    with caplog.at_level("ERROR", logger="tests.exception"):
        try:
            raise ConfigurationError("bad rules")
        except ConfigurationError:
            logger.exception("Config failed")

    payload = json.loads(JSONFormatter().format(caplog.records[-1]))
    assert payload['level'] == "ERROR"
    assert "ConfigurationError: bad rules" in payload['exception']


def test_logger_handlers_not_duplicated():
    first = get_logger("tests.handlers")
    second = get_logger("tests.handlers")

    assert first.logger is second.logger
    assert len(second.logger.handlers) == 1


def test_json_formatter():
    import logging

    record = logging.LogRecord("tests.fmt", logging.WARNING, __file__, 1, "careful", None, None)
    payload = json.loads(JSONFormatter().format(record))

    assert payload['level'] == "WARNING"
    assert payload['logger'] == "tests.fmt"
    assert payload['message'] == "careful"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
