"""Tests for logging helpers."""

import logging

from npm_mirror.common.logging_utils import Timer, configure_logging, extra_context, safe_url


class TestSafeUrl:
    def test_strips_credentials(self):
        assert safe_url("https://user:pw@registry.example.com/pkg") == "https://[REDACTED]@registry.example.com/pkg"

    def test_redacts_token_query(self):
        assert "secret-value" not in safe_url("https://r.example.com/pkg?token=secret-value&x=1")

    def test_plain_url_unchanged(self):
        assert safe_url("https://registry.npmjs.org/lodash") == "https://registry.npmjs.org/lodash"


def test_extra_context_drops_none():
    assert extra_context(event="x", target=None) == {"event": "x"}


def test_timer_measures():
    with Timer() as t:
        pass
    assert t.duration_ms() >= 0


def test_configure_logging_idempotent(monkeypatch):
    monkeypatch.setenv("NPM_MIRROR_LOG_LEVEL", "warning")
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        configure_logging()
        configure_logging()
        assert len(root.handlers) == len(handlers) + 1
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
