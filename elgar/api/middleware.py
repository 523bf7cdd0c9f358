"""API middleware: correlation ID, audit trigger."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from elgar.core.context import actor_id_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)
        actor_id_ctx.set(None)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """After response: log structured audit event (correlation_id, user_id, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        audit_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "user_id": getattr(request.state, "user_id", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(audit_event, ensure_ascii=False))
        return response
