from __future__ import annotations

import logging

from backend.eliza.config.settings import Settings, get_settings, settings_public_summary, validate_for_env
from backend.eliza.observability.logging import hash_session_id, logging_config, safe_redact, structured_log


def _settings(**env) -> Settings:
    return Settings(_env_file=None, **env)


def test_defaults(monkeypatch):
    for name in ("APP_ENV", "LOG_LEVEL", "ELIZA_SCRIPT_PATH", "ELIZA_TRACE_ENABLED", "ELIZA_MAX_SESSIONS"):
        monkeypatch.delenv(name, raising=False)
    s = _settings()
    assert s.app_env == "dev"
    assert s.log_level == "INFO"
    assert s.eliza_script_path is None
    assert s.eliza_use_nomatch_msgs is True
    assert s.eliza_max_link_hops == 10000
    assert s.eliza_trace_enabled is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("APP_ENV", "PROD")
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    monkeypatch.setenv("ELIZA_USE_NOMATCH_MSGS", "false")
    monkeypatch.setenv("ELIZA_MAX_SESSIONS", "7")
    monkeypatch.setenv("ELIZA_SCRIPT_PATH", "   ")
    s = _settings()
    assert s.app_env == "prod"
    assert s.log_level == "DEBUG"
    assert s.eliza_use_nomatch_msgs is False
    assert s.eliza_max_sessions == 7
    assert s.eliza_script_path is None


def test_numbers_are_clamped():
    s = _settings(DEBUG_ERRORS=-3, ELIZA_MAX_LINK_HOPS=0, ELIZA_MAX_SESSIONS=-1, ELIZA_MAX_INPUT_CHARS=0)
    assert s.debug_errors == 0
    assert s.eliza_max_link_hops == 1
    assert s.eliza_max_sessions == 1
    assert s.eliza_max_input_chars == 1


def test_prod_issues():
    summary = validate_for_env(_settings(APP_ENV="prod", DEBUG_ERRORS=1, ELIZA_TRACE_ENABLED=True))
    assert summary["issues"] == ["DEBUG_ERRORS must be 0 in prod", "ELIZA_TRACE_ENABLED should be off in prod"]
    assert validate_for_env(_settings(APP_ENV="dev", DEBUG_ERRORS=1))["issues"] == []


def test_public_summary_names_builtin_script():
    summary = settings_public_summary(_settings())
    assert summary["script"] == "builtin:doctor"
    assert set(summary) >= {"env", "log_level", "max_sessions", "trace_enabled"}


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


def test_logging_config_level():
    cfg = logging_config("WARNING")
    assert cfg["root"]["level"] == "WARNING"
    assert cfg["disable_existing_loggers"] is False


def test_safe_redact_drops_conversation_text():
    event = {"event": "message", "text": "my secret", "response": "WHY", "turn": 3}
    assert safe_redact(event) == {"event": "message", "turn": 3}
    assert "text" in event


def test_structured_log_never_logs_text(caplog):
    with caplog.at_level(logging.INFO, logger="backend.eliza.observability.logging"):
        structured_log({"event": "message", "text": "my secret", "turn": 1})
    assert "my secret" not in caplog.text
    assert '"event":"message"' in caplog.text


def test_hash_session_id_is_stable_and_short():
    assert hash_session_id("abc") == hash_session_id("abc")
    assert hash_session_id("abc") != hash_session_id("abd")
    assert len(hash_session_id(None)) == 16
