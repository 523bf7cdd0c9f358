# elgar/main.py

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from elgar.api.middleware import AuditTriggerMiddleware, CorrelationIdMiddleware
from elgar.api.routers import action_reports, health, me, permissions
from elgar.application.exceptions import (
    ApplicationError,
    DuplicateReportError,
    NotFoundError,
    StoreFailureError,
)
from elgar.config.logging import configure_logging
from elgar.config.settings import get_settings
from elgar.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidStatusTransitionError,
)
from elgar.security.exceptions import AuthorizationError, UnauthenticatedError

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(CorrelationIdMiddleware)


def _error(status_code: int, exc) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


@app.exception_handler(UnauthenticatedError)
async def unauthenticated_error_handler(request, exc: UnauthenticatedError):
    response = _error(401, exc)
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request, exc: AuthorizationError):
    return _error(403, exc)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return _error(422, exc)


@app.exception_handler(InvalidStatusTransitionError)
async def invalid_transition_error_handler(request, exc: InvalidStatusTransitionError):
    return _error(409, exc)


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return _error(400, exc)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(DuplicateReportError)
async def duplicate_report_error_handler(request, exc: DuplicateReportError):
    return _error(409, exc)


@app.exception_handler(StoreFailureError)
async def store_failure_error_handler(request, exc: StoreFailureError):
    logger.error("store_failure", extra={"error": exc.message})
    return _error(503, exc)


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return _error(500, exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.exception("unexpected_error")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /me, /action-reports, /permissions
app.include_router(health.router)
app.include_router(me.router, prefix="/me")
app.include_router(action_reports.router, prefix="/action-reports")
app.include_router(permissions.router, prefix="/permissions")
