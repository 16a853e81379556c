"""Tests for centralized logging setup."""

import json
import logging
import sys

import pytest

from wormhole.core.engine import WormholeEngine
from wormhole.utils.logging_setup import JSONFormatter, log_operation, setup_logging


@pytest.fixture
def file_logger(tmp_path):
    logger = setup_logging("wormhole-test", level="DEBUG", log_dir=tmp_path, console=False, file=True)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogging:
    
    def test_console_only_by_default(self):
        logger = setup_logging("wormhole-console-test")
        try:
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0], logging.StreamHandler)
            assert logger.propagate is False
        finally:
            logger.handlers.clear()
    
    def test_json_file_output(self, file_logger, tmp_path):
        log_operation(file_logger, "scan", files=3)
        file_logger.handlers[0].flush()
        
        log_files = list(tmp_path.glob("wormhole_*.jsonl"))
        assert len(log_files) == 1
        
        record = json.loads(log_files[0].read_text().splitlines()[0])
        assert record["level"] == "INFO"
        assert record["operation"] == "scan"
        assert record["files"] == 3
        assert "Starting operation: scan" in record["message"]
    
    def test_setup_is_idempotent(self):
        logger = setup_logging("wormhole-repeat-test", console=True)
        logger = setup_logging("wormhole-repeat-test", console=True)
        try:
            assert len(logger.handlers) == 1
        finally:
            logger.handlers.clear()


class TestJSONFormatter:
    
    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed %s", ("here",), exc_info=None
            )
            record.exc_info = sys.exc_info()
        
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "failed here"
        assert "ValueError: boom" in payload["exception"]
    
    def test_soul_fields_from_engine_insert(self, caplog):
        engine = WormholeEngine()
        with caplog.at_level(logging.DEBUG, logger="wormhole.core.engine"):
            engine.insert("x = 1", soul_id="A", origin="pkg/a.py")
        
        record = next(r for r in caplog.records if r.getMessage().startswith("Inserted soul"))
        payload = json.loads(JSONFormatter().format(record))
        assert payload["soul_id"] == "A"
        assert payload["origin"] == "pkg/a.py"
