"""
Request tracing middleware.

Each request runs with a trace id stored in ``trace_id_context``; every log
line written while serving it carries that id, and the response echoes it
in ``X-Trace-ID``.
"""

import re
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from oauth2_registry.core.logging import logger
from oauth2_registry.core.trace_context import trace_id_context

TRACE_ID_HEADER = "X-Trace-ID"

# Upstream ids are echoed into logs and headers, so only plain tokens are reused.
VALID_TRACE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_trace_id(incoming: str | None) -> str:
    """Reuse a well-formed upstream trace id, otherwise mint a new one."""
    if incoming and VALID_TRACE_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Binds a trace id to the request and logs its outcome and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = resolve_trace_id(request.headers.get(TRACE_ID_HEADER))
        token = trace_id_context.set(trace_id)
        started = time.perf_counter()
        target = f"{request.method} {request.url.path}"

        logger.info(f"Request started: {target}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Request failed: {target}")
            raise
        else:
            response.headers[TRACE_ID_HEADER] = trace_id
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"Request completed: {target} - Status: {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
            return response
        finally:
            trace_id_context.reset(token)


__all__ = ["TraceIDMiddleware", "TRACE_ID_HEADER", "resolve_trace_id"]
