"""
Request logging for the admin API.

One line per request with status, duration, the signed-in admin and a
correlation id. JSON bodies (login, entity forms) can be included with
credentials redacted; upload bodies are only summarized by size. Static media
and health checks are not logged.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Optional, Tuple

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("caterdesk.api")

REDACTED = "[REDACTED]"


@dataclass
class LoggingConfig:
    """Configuration for request logging."""

    enabled: bool = True
    log_request_body: bool = False
    max_body_log_size: int = 10_000

    quiet_paths: FrozenSet[str] = frozenset({"/health", "/favicon.ico"})
    quiet_prefixes: Tuple[str, ...] = ("/media/",)

    sensitive_headers: FrozenSet[str] = frozenset(
        {"authorization", "apikey", "cookie", "set-cookie"}
    )
    sensitive_keys: FrozenSet[str] = field(
        default_factory=lambda: frozenset(
            {"password", "password_hash", "token", "api_key", "apikey", "supabase_key"}
        )
    )

    slow_request_seconds: float = 2.0
    request_id_header: str = "X-Request-ID"

    def is_quiet(self, path: str) -> bool:
        return path in self.quiet_paths or path.startswith(self.quiet_prefixes)


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per line; request details travel in ``record.http``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get() or None,
        }
        http = getattr(record, "http", None)
        if http:
            entry.update(http)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def redact_sensitive_data(data: Any, keys: FrozenSet[str]) -> Any:
    """Replace the values of credential-like keys anywhere in ``data``."""
    if isinstance(data, dict):
        return {
            k: REDACTED if k.lower() in keys else redact_sensitive_data(v, keys)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [redact_sensitive_data(item, keys) for item in data]
    return data


def get_request_id() -> str:
    return request_id_var.get()


def _log_level(status_code: int, slow: bool) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400 or slow:
        return logging.WARNING
    return logging.INFO


def _signed_in_email(request: Request) -> Optional[str]:
    services = getattr(request.app.state, "services", None)
    if services is None:
        return None
    session = services.auth_gate.current_user
    return session.email if session else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and stamps the response with its correlation id."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    async def _body_summary(self, request: Request) -> Optional[str]:
        content_type = request.headers.get("content-type", "")

        if content_type.startswith("multipart/form-data"):
            size = request.headers.get("content-length", "?")
            return f"[multipart form, {size} bytes]"

        if not content_type.startswith("application/json"):
            return None

        body = await request.body()
        if len(body) > self.config.max_body_log_size:
            return f"[json body, {len(body)} bytes]"
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return "[invalid json]"
        return json.dumps(redact_sensitive_data(parsed, self.config.sensitive_keys), ensure_ascii=False)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        header = self.config.request_id_header
        request_id = request.headers.get(header) or uuid.uuid4().hex[:8]
        token = request_id_var.set(request_id)

        try:
            if not self.config.enabled or self.config.is_quiet(request.url.path):
                response = await call_next(request)
                response.headers[header] = request_id
                return response

            http = {
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
                "headers": {
                    k: REDACTED if k.lower() in self.config.sensitive_headers else v
                    for k, v in request.headers.items()
                },
            }
            if self.config.log_request_body:
                summary = await self._body_summary(request)
                if summary:
                    http["body"] = summary

            started = time.perf_counter()
            response = await call_next(request)
            elapsed = time.perf_counter() - started

            response.headers[header] = request_id
            slow = elapsed > self.config.slow_request_seconds

            http["status_code"] = response.status_code
            http["duration_ms"] = round(elapsed * 1000, 2)
            http["admin"] = _signed_in_email(request)
            if response.status_code == 303:
                http["location"] = response.headers.get("location")

            message = f"{request.method} {request.url.path} -> {response.status_code} ({http['duration_ms']}ms)"
            if slow:
                message = f"[SLOW] {message}"

            logger.log(_log_level(response.status_code, slow), message, extra={"http": http})
            return response
        finally:
            request_id_var.reset(token)


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install request logging.

    Args:
        app: FastAPI application instance.
        config: Logging configuration.
        structured: Emit JSON lines on the ``caterdesk`` logger instead of
            leaving formatting to the host's logging setup.
    """
    if structured:
        root = logging.getLogger("caterdesk")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            root.addHandler(handler)
        root.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
