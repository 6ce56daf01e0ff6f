from __future__ import annotations

import functools
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    debug_errors: int = Field(0, alias="DEBUG_ERRORS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Script
    eliza_script_path: Optional[str] = Field(None, alias="ELIZA_SCRIPT_PATH")
    eliza_use_nomatch_msgs: bool = Field(True, alias="ELIZA_USE_NOMATCH_MSGS")
    eliza_max_link_hops: int = Field(10000, alias="ELIZA_MAX_LINK_HOPS")

    # HTTP sessions
    eliza_max_sessions: int = Field(1000, alias="ELIZA_MAX_SESSIONS")
    eliza_max_input_chars: int = Field(2000, alias="ELIZA_MAX_INPUT_CHARS")
    eliza_trace_enabled: bool = Field(False, alias="ELIZA_TRACE_ENABLED")

    @field_validator("debug_errors")
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(0, v)

    @field_validator("eliza_max_link_hops", "eliza_max_sessions", "eliza_max_input_chars")
    @classmethod
    def clamp_positive(cls, v: int) -> int:
        return max(1, v)

    @field_validator("app_env")
    @classmethod
    def normalize_env(cls, v: str) -> str:
        val = (v or "dev").lower()
        return val

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @field_validator("eliza_script_path")
    @classmethod
    def empty_path_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        text = v.strip()
        return text or None


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def validate_for_env(settings: Settings) -> Dict[str, Any]:
    issues: list[str] = []
    if settings.app_env == "prod":
        if settings.debug_errors != 0:
            issues.append("DEBUG_ERRORS must be 0 in prod")
        if settings.eliza_trace_enabled:
            issues.append("ELIZA_TRACE_ENABLED should be off in prod")
    summary = settings_public_summary(settings)
    summary["issues"] = issues
    return summary


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "log_level": s.log_level,
        "script": s.eliza_script_path or "builtin:doctor",
        "use_nomatch_msgs": s.eliza_use_nomatch_msgs,
        "max_link_hops": s.eliza_max_link_hops,
        "max_sessions": s.eliza_max_sessions,
        "max_input_chars": s.eliza_max_input_chars,
        "trace_enabled": s.eliza_trace_enabled,
    }


__all__ = ["Settings", "get_settings", "settings_public_summary", "validate_for_env"]
