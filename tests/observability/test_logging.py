"""Tests for structured logging configuration."""

import logging

import pytest
import structlog

from fusion.observability.logging import (
    ENV_DEBUG,
    REDACTED_PLACEHOLDER,
    _redact_event,
    configure_logging,
    get_logger,
    is_debug_mode,
    request_context,
    sanitize_for_logging,
)


class TestConfigureLogging:
    def test_configure_logging_sets_up_structlog(self) -> None:
        configure_logging(log_format="console", log_level="DEBUG", force=True)

        logger = get_logger("test")
        assert logger is not None

    def test_configure_logging_respects_log_level(self) -> None:
        configure_logging(log_format="console", log_level="WARNING", force=True)

        assert logging.getLogger().level == logging.WARNING

    def test_configure_logging_with_json_format(self) -> None:
        configure_logging(log_format="json", log_level="INFO", force=True)

        assert get_logger("test.json") is not None

    def test_configure_logging_installs_single_handler(self) -> None:
        configure_logging(log_format="console", log_level="INFO", force=True)
        configure_logging(log_format="console", log_level="INFO", force=True)

        assert len(logging.getLogger().handlers) == 1

    def test_second_call_without_force_is_noop(self) -> None:
        configure_logging(log_format="console", log_level="ERROR", force=True)
        configure_logging(log_format="console", log_level="DEBUG")

        assert logging.getLogger().level == logging.ERROR


class TestRequestContext:
    def test_values_bound_inside_block(self) -> None:
        with request_context(protocol="xml", deviceid="host-2026-10-19-11-16-00"):
            context = structlog.contextvars.get_contextvars()
            assert context["protocol"] == "xml"
            assert context["deviceid"] == "host-2026-10-19-11-16-00"

        assert "protocol" not in structlog.contextvars.get_contextvars()

    def test_outer_binding_restored(self) -> None:
        with request_context(protocol="json"):
            with request_context(protocol="xml"):
                assert structlog.contextvars.get_contextvars()["protocol"] == "xml"
            assert structlog.contextvars.get_contextvars()["protocol"] == "json"

    def test_restored_on_exception(self) -> None:
        with pytest.raises(RuntimeError):
            with request_context(protocol="json"):
                raise RuntimeError("boom")

        assert "protocol" not in structlog.contextvars.get_contextvars()


class TestDebugMode:
    @pytest.mark.parametrize("value", ["true", "1", "yes", "ON"])
    def test_truthy(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv(ENV_DEBUG, value)
        assert is_debug_mode() is True

    @pytest.mark.parametrize("value", ["", "0", "false", "off"])
    def test_falsy(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv(ENV_DEBUG, value)
        assert is_debug_mode() is False

    def test_unset(self) -> None:
        assert is_debug_mode() is False


class TestSanitizeForLogging:
    def test_redacts_sensitive_keys(self) -> None:
        result = sanitize_for_logging({"action": "getConfig", "password": "secret123"})
        assert result == {"action": "getConfig", "password": REDACTED_PLACEHOLDER}

    def test_nested(self) -> None:
        result = sanitize_for_logging({"task": {"Authorization": "Basic abc", "name": "inventory"}})
        assert result == {"task": {"Authorization": REDACTED_PLACEHOLDER, "name": "inventory"}}

    def test_list_of_dicts(self) -> None:
        result = sanitize_for_logging({"items": [{"token": "t"}, "plain"]})
        assert result == {"items": [{"token": REDACTED_PLACEHOLDER}, "plain"]}

    def test_empty(self) -> None:
        assert sanitize_for_logging({}) == {}

    def test_tuples_walked(self) -> None:
        result = sanitize_for_logging({"task": ({"api_key": "k"}, "inventory")})
        assert result == {"task": [{"api_key": REDACTED_PLACEHOLDER}, "inventory"]}

    def test_none(self) -> None:
        assert sanitize_for_logging(None) == {}

    def test_input_untouched(self) -> None:
        data = {"password": "secret123"}
        sanitize_for_logging(data)
        assert data == {"password": "secret123"}


class TestEventRedaction:
    def test_redacts_event_fields(self) -> None:
        event = _redact_event(None, "debug", {"event": "fusion.test", "args": {"token": "t"}})
        assert event == {"event": "fusion.test", "args": {"token": REDACTED_PLACEHOLDER}}

    def test_logged_events_redacted(self, caplog: pytest.LogCaptureFixture) -> None:
        configure_logging(log_format="console", log_level="DEBUG", force=True)
        caplog.set_level(logging.DEBUG)

        get_logger("fusion.test.redaction").info("fusion.test.event", password="hunter2")

        assert "fusion.test.event" in caplog.text
        assert "hunter2" not in caplog.text
        assert REDACTED_PLACEHOLDER in caplog.text


class TestLogLevel:
    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="VERBOSE"):
            configure_logging(log_level="VERBOSE", force=True)

    def test_level_case_insensitive(self) -> None:
        configure_logging(log_format="console", log_level="debug", force=True)
        assert logging.getLogger().level == logging.DEBUG
