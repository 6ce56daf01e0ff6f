from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Path, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from backend.eliza.config.settings import Settings, get_settings, validate_for_env
from backend.eliza.engine.trace import NullTracer, StringTracer
from backend.eliza.observability.logging import configure_logging, hash_session_id, structured_log
from backend.eliza.observability.request_id import get_request_id
from backend.eliza.schemas import (
    ErrorResponse,
    FailureType,
    MessageRequest,
    MessageResponse,
    SessionCreated,
)
from backend.eliza.script.doctor import load_doctor_script
from backend.eliza.script.errors import ScriptError
from backend.eliza.script.parser import Script, load_script_file
from backend.eliza.script.render import render_script
from backend.eliza.sessions import SessionRegistry

logger = logging.getLogger(__name__)

APP_VERSION = "2026.1.0"


def load_configured_script(settings: Settings) -> Script:
    try:
        if settings.eliza_script_path:
            script = load_script_file(settings.eliza_script_path)
        else:
            script = load_doctor_script()
    except ScriptError as exc:
        logger.critical(
            "[CFG] script rejected",
            extra={"script": settings.eliza_script_path or "builtin:doctor", "error": str(exc)},
        )
        raise
    return script


def _failure_response(
    status_code: int,
    failure_type: FailureType,
    message: str,
    request_id: str | None = None,
) -> JSONResponse:
    payload = ErrorResponse(failure_type=failure_type, message=message[:200])
    resp = JSONResponse(status_code=status_code, content=json.loads(payload.model_dump_json()))
    if request_id:
        resp.headers["X-Request-Id"] = request_id
    return resp


def _with_request_id(response: JSONResponse, request_id: str) -> JSONResponse:
    response.headers.setdefault("X-Request-Id", request_id)
    return response


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def create_app(settings: Optional[Settings] = None, script: Optional[Script] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    summary = validate_for_env(settings)
    logger.info("[CFG] loaded", extra=summary)

    if script is None:
        script = load_configured_script(settings)

    app = FastAPI(title="ELIZA DOCTOR")
    app.state.settings = settings
    app.state.started = time.monotonic()
    app.state.registry = SessionRegistry(
        script,
        max_sessions=settings.eliza_max_sessions,
        use_nomatch_msgs=settings.eliza_use_nomatch_msgs,
        max_link_hops=settings.eliza_max_link_hops,
    )

    @app.get("/health")
    async def health(request: Request) -> Dict[str, Any]:
        return {
            "status": "ok",
            "version": APP_VERSION,
            "uptime_seconds": int(time.monotonic() - request.app.state.started),
        }

    @app.get("/api/script", response_class=PlainTextResponse)
    async def get_script(request: Request) -> str:
        return render_script(_registry(request).script)

    @app.post("/api/sessions", response_model=SessionCreated)
    async def create_session(request: Request) -> JSONResponse:
        rid = get_request_id(request)
        session_id, session = _registry(request).create()
        structured_log({"event": "session_created", "session": hash_session_id(session_id), "request_id": rid})
        body = SessionCreated(session_id=session_id, greeting=session.greeting)
        return _with_request_id(JSONResponse(content=body.model_dump()), rid)

    @app.post("/api/sessions/{session_id}/messages", response_model=MessageResponse)
    async def post_message(
        request: Request,
        session_id: str = Path(..., description="Session identifier"),
    ) -> JSONResponse:
        rid = get_request_id(request)
        settings = _settings(request)
        session = _registry(request).get(session_id)
        if session is None:
            return _failure_response(404, FailureType.SESSION_NOT_FOUND, "Unknown session.", rid)

        try:
            raw = await request.json()
        except ValueError:
            logger.info("[API] message reject", extra={"error_code": "json_invalid", "request_id": rid})
            return _failure_response(
                400, FailureType.REQUEST_SCHEMA_INVALID, "Request body must be valid JSON.", rid
            )

        if isinstance(raw, dict) and isinstance(raw.get("text"), str) and not raw["text"].strip():
            return _failure_response(400, FailureType.EMPTY_INPUT, "text must not be empty.", rid)
        try:
            payload = MessageRequest.model_validate(raw)
        except ValidationError:
            logger.info("[API] message reject", extra={"error_code": "schema_invalid", "request_id": rid})
            return _failure_response(400, FailureType.REQUEST_SCHEMA_INVALID, "Invalid request body.", rid)

        if len(payload.text) > settings.eliza_max_input_chars:
            return _failure_response(
                400,
                FailureType.REQUEST_TOO_LARGE,
                f"text must be at most {settings.eliza_max_input_chars} characters.",
                rid,
            )

        tracer: Optional[StringTracer] = None
        if payload.trace and settings.eliza_trace_enabled:
            tracer = StringTracer()
        session.set_tracer(tracer or NullTracer())
        try:
            response = session.respond(payload.text)
        finally:
            session.set_tracer(None)

        structured_log(
            {
                "event": "message",
                "session": hash_session_id(session_id),
                "request_id": rid,
                "turn": session.state.turns,
                "limit": session.limit,
                "text": payload.text,
            }
        )
        body = MessageResponse(
            session_id=session_id,
            response=response,
            turn=session.state.turns,
            trace=tracer.text() if tracer is not None else None,
        )
        return _with_request_id(JSONResponse(content=body.model_dump()), rid)

    @app.delete("/api/sessions/{session_id}")
    async def delete_session(
        request: Request,
        session_id: str = Path(..., description="Session identifier"),
    ) -> JSONResponse:
        rid = get_request_id(request)
        if not _registry(request).delete(session_id):
            return _failure_response(404, FailureType.SESSION_NOT_FOUND, "Unknown session.", rid)
        structured_log({"event": "session_deleted", "session": hash_session_id(session_id), "request_id": rid})
        return _with_request_id(JSONResponse(content={"status": "ok"}), rid)

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:  # noqa: BLE001
        logger.exception("Unhandled error in request")
        content = {
            "ok": False,
            "failure_type": FailureType.INTERNAL_ERROR_SANITIZED.value,
            "message": "Internal server error",
        }
        if _settings(request).debug_errors == 1:
            content["detail"] = str(exc)[:300]
        return JSONResponse(status_code=500, content=content)

    return app


__all__ = ["APP_VERSION", "create_app", "load_configured_script"]
