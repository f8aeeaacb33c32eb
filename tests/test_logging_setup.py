#!/usr/bin/env python3
"""
Test logging configuration helpers
"""

import json
import logging
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from codecollector.utils.logging_setup import (
    TRACE_LEVEL, JsonFormatter, configure_logging, get_logger, resolve_level
)


def test_resolve_level():
    assert resolve_level('trace') == TRACE_LEVEL
    assert resolve_level('DEBUG') == logging.DEBUG
    assert resolve_level('bogus') == logging.INFO


def test_trace_method_available():
    logger = get_logger('codecollector.test')
    assert hasattr(logger, 'trace')


def test_json_formatter_includes_context():
    record = logging.LogRecord('codecollector.pipeline', logging.INFO, __file__, 1,
                               'Collected 3 files', None, None)
    record.extra = {'collected': 3}

    data = json.loads(JsonFormatter().format(record))

    assert data['level'] == 'INFO'
    assert data['component'] == 'codecollector.pipeline'
    assert data['message'] == 'Collected 3 files'
    assert data['collected'] == 3


def test_configure_logging_level_and_file(tmp_path, monkeypatch):
    monkeypatch.delenv('CODECOLLECTOR_LOG_LEVEL', raising=False)
    log_file = tmp_path / 'logs' / 'collector.log'
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_level='TRACE', log_file=str(log_file), json_output=False)
        assert root.level == TRACE_LEVEL

        get_logger('codecollector.test').trace('per-path decision')
        for handler in root.handlers:
            handler.flush()

        assert 'per-path decision' in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
