from __future__ import annotations

from pathlib import Path

from issuebot.errors import (
    ConfigParseError,
    DuplicateStateError,
    GitHubAPIError,
    MissingFieldError,
    SchemaValidationError,
    SourceReadError,
    UnknownVariantError,
    classify_error,
    redact,
)
from issuebot.schemas import SchemaViolation


def test_classify_source_read():
    info = classify_error(SourceReadError(Path('cfg.yaml'), 'No such file'))
    assert info.category == 'config.io'
    assert info.details == {'path': 'cfg.yaml'}
    assert info.transient is False


def test_classify_parse():
    info = classify_error(ConfigParseError('cfg.yaml', 'mapping values are not allowed', 'line 3, column 7'))
    assert info.category == 'config.parse'
    assert 'line 3, column 7' in info.message


def test_classify_schema_carries_violations():
    violation = SchemaViolation('/states/0', "'label' is a required property", 'required')
    info = classify_error(SchemaValidationError('cfg.yaml', [violation]))
    assert info.category == 'config.schema'
    assert info.details == {'violations': [violation.as_dict()]}


def test_classify_decode():
    assert classify_error(UnknownVariantError('Action', 'explode')).category == 'config.decode'
    assert classify_error(MissingFieldError('Timeout', 'timeout')).category == 'config.decode'


def test_classify_duplicate_states():
    info = classify_error(DuplicateStateError(['open']))
    assert info.category == 'config.semantic'
    assert info.original_type == 'DuplicateStateError'


def test_classify_github_server_error_is_transient():
    assert classify_error(GitHubAPIError('boom', status=502)).transient is True
    assert classify_error(GitHubAPIError('nope', status=404)).transient is False


def test_classify_network():
    info = classify_error(RuntimeError('Connection reset by peer'))
    assert info.category == 'network'
    assert info.transient is True


def test_classify_generic():
    info = classify_error(ValueError('Some other problem'))
    assert info.category == 'generic'


def test_redact_tokens():
    sample = (
        "Token ghp_ABCDEFGHIJKLMNOPQRSTUVWX plus github_pat_1234567890abcdefghijkl "
        "and header Bearer abcdefgh12345678"
    )
    out = redact(sample)
    assert 'ghp_' not in out
    assert 'github_pat_' not in out
    assert 'abcdefgh12345678' not in out
    assert '<redacted>' in out


def test_github_error_redacts_response_text():
    err = GitHubAPIError('failed', status=401, response_text='bad credentials ghp_ABCDEFGHIJKLMNOPQRSTUVWX')
    assert 'ghp_' not in (err.response_text or '')
    assert err.status == 401
