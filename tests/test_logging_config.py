"""Tests for logging setup and secret masking."""

import io
import logging

from common.logging_config import (
    SensitiveDataFilter,
    mask_sensitive,
    set_correlation_id,
    setup_logging,
)


def test_webhook_token_is_masked():
    masked = mask_sensitive('posting to https://discord.com/api/webhooks/123456/abcDEF-ghi_jkl')

    assert 'abcDEF-ghi_jkl' not in masked
    assert '/webhooks/123456/***MASKED***' in masked


def test_token_fields_are_masked():
    assert mask_sensitive('token=hunter2') == 'token=***MASKED***'
    assert mask_sensitive('Bearer xyz') == 'Bearer ***MASKED***'


def test_filter_masks_message_and_args():
    record = logging.LogRecord(
        'cli', logging.INFO, __file__, 1,
        'url=%s', ('https://x.test/api/webhooks/1/secret',), None,
    )

    assert SensitiveDataFilter().filter(record)
    assert 'secret' not in record.getMessage()


def test_setup_logging_writes_formatted_records():
    stream = io.StringIO()
    logger = setup_logging('test-component-format', log_level='DEBUG', stream=stream)

    logger.debug('hello https://x.test/api/webhooks/9/tok')

    output = stream.getvalue()
    assert 'test-component-format - DEBUG - hello' in output
    assert 'tok' not in output.split('/webhooks/9/')[1]


def test_setup_logging_is_idempotent():
    stream = io.StringIO()
    first = setup_logging('test-component-idem', log_level='INFO', stream=stream)
    second = setup_logging('test-component-idem', log_level='WARNING', stream=stream)

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.WARNING


def test_correlation_id_is_added_to_format():
    stream = io.StringIO()
    logger = setup_logging('test-component-corr', log_level='INFO', stream=stream)

    set_correlation_id(logger, 'batch123')
    logger.info('chunk sent')

    assert '[batch123] - chunk sent' in stream.getvalue()
