import json

import pytest

from issuebot.logging import StructuredLogger, configure_logging, get_logger


def test_structured_logger_json_format(capsys):
    """Test that structured logger produces JSON output when configured."""
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_operation('test_operation', param1='value1', param2=42)

    captured = capsys.readouterr()
    log_lines = [line for line in captured.out.strip().split('\n') if line]

    assert len(log_lines) == 1
    log_data = json.loads(log_lines[0])

    assert log_data['level'] == 'INFO'
    assert log_data['operation'] == 'test_operation'
    assert log_data['param1'] == 'value1'
    assert log_data['param2'] == 42
    assert 'timestamp' in log_data


def test_structured_logger_regular_format(capsys):
    """Test that structured logger produces regular text output when JSON disabled."""
    logger = StructuredLogger(name='test', json_logging=False, level='INFO')
    logger.log_operation('test_operation', param1='value1')

    captured = capsys.readouterr()
    assert 'Operation: test_operation' in captured.out
    assert 'INFO' in captured.out


def test_structured_logger_performance_timing(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_performance('config_load', 1234.56, state_count=10)

    log_data = json.loads(capsys.readouterr().out.strip())

    assert log_data['operation'] == 'config_load'
    assert log_data['duration_ms'] == 1234.56
    assert log_data['state_count'] == 10


def test_timed_operation_context_manager(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')

    with logger.timed_operation('config_load', source='issuebot.yaml'):
        pass

    log_lines = [line for line in capsys.readouterr().out.strip().split('\n') if line]
    assert len(log_lines) == 2

    start_log = json.loads(log_lines[0])
    assert start_log['operation'] == 'config_load_start'
    assert start_log['source'] == 'issuebot.yaml'

    perf_log = json.loads(log_lines[1])
    assert perf_log['operation'] == 'config_load'
    assert 'duration_ms' in perf_log


def test_timed_operation_logs_and_reraises_failure(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')

    with pytest.raises(ValueError):
        with logger.timed_operation('config_load'):
            raise ValueError('broken')

    log_lines = [json.loads(line) for line in capsys.readouterr().out.strip().split('\n') if line]
    assert log_lines[-1]['level'] == 'ERROR'
    assert log_lines[-1]['error'] == 'broken'
    assert log_lines[-1]['error_type'] == 'ValueError'


def test_level_filters_debug(capsys):
    logger = StructuredLogger(name='test', json_logging=False, level='WARNING')
    logger.info('hidden')
    logger.warning('shown')
    out = capsys.readouterr().out
    assert 'hidden' not in out
    assert 'shown' in out


def test_get_logger_reads_environment(monkeypatch, capsys):
    monkeypatch.setenv('ISSUEBOT_LOG_JSON', '1')
    logger = get_logger()
    assert logger.json_logging is True
    assert get_logger() is logger


def test_configure_logging():
    logger1 = configure_logging(json_logging=True, level='DEBUG')
    logger2 = configure_logging(json_logging=False, level='INFO')

    assert logger1 != logger2
    assert get_logger() is logger2
