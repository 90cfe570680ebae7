# backend/tests/unit/test_logging_setup.py
import logging

import structlog

from concierge.utils.logging import redact_sensitive_fields, setup_logging


def test_sensitive_fields_are_masked():
    event = {"event": "turn", "message": "my address is 12 Elm St", "user_id": "user-1"}
    assert redact_sensitive_fields(None, "info", event) == {
        "event": "turn", "message": "[redacted]", "user_id": "user-1"
    }


def test_setup_is_idempotent():
    setup_logging()
    setup_logging()
    handlers = [h for h in logging.getLogger().handlers
                if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)]
    assert len(handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
