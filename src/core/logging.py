"""Structured logging for the extraction service.

Every record is one JSON object on stdout carrying ``request_id`` and ``path``
(``None`` outside HTTP requests), ``level``, an ISO ``timestamp`` and the
snake_case ``event`` name plus its keyword fields.  Decoder libraries that log
through stdlib go to stderr; the noisy ones are capped in
:data:`_QUIET_LOGGERS`.
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

# structlog must be imported before its typing helpers
import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from structlog.types import Processor

__all__: list[str] = [
    "configure_logging",
    "RequestLoggingMiddleware",
    "REQUEST_ID_HEADER",
]

REQUEST_ID_HEADER = "X-Request-ID"

# Client supplied ids longer than this are replaced.
_MAX_REQUEST_ID_LENGTH = 128

# pdfminer logs every content stream operator at DEBUG; the multipart
# parser logs every form part callback.
_QUIET_LOGGERS: Dict[str, int] = {
    "pdfminer": logging.WARNING,
    "python_multipart": logging.INFO,
}


def _ensure_request_context(
    logger: Any,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Default *request_id* and *path* to ``None`` for library and script use."""

    event_dict.setdefault("request_id", None)
    event_dict.setdefault("path", None)
    return event_dict


# merge_contextvars first so bound request values win.
_JSON_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    _ensure_request_context,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def _configure_stdlib_logging(level: int) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, floor in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))


_LOGGING_CONFIGURED: bool = False


def configure_logging(debug: bool = False) -> None:
    """Set up JSON logging for the process; later calls do nothing.

    Parameters
    ----------
    debug:
        ``DEBUG`` level when *True*, ``INFO`` otherwise.  The libraries in
        :data:`_QUIET_LOGGERS` never go below their floor.
    """

    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    level: int = logging.DEBUG if debug else logging.INFO

    _configure_stdlib_logging(level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=_JSON_PROCESSORS,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True


def _resolve_request_id(request: Request) -> str:
    """Use the caller's ``X-Request-ID`` when usable, else a fresh 32-char hex."""
    supplied = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if supplied and len(supplied) <= _MAX_REQUEST_ID_LENGTH:
        return supplied
    return uuid.uuid4().hex


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Correlate every log line of an upload with one request id.

    Binds ``request_id``, ``path`` and ``method`` for the duration of the
    request, exposes the id as ``request.state.request_id`` for error bodies
    and extraction responses, returns it in the ``X-Request-ID`` header and
    finishes with a ``request_completed`` record.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start: float = time.perf_counter()
        request_id = _resolve_request_id(request)
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )

        response: Optional[Response] = None
        try:
            response = await call_next(request)
        finally:
            structlog.get_logger("http").info(
                "request_completed",
                status_code=response.status_code if response is not None else 500,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
