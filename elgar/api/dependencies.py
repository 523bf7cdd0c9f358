"""FastAPI dependency injection: store repositories, services, current user, permission guard."""

import logging
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from elgar.application.privilege_service import PrivilegeService
from elgar.application.report_workflow import ActionReportWorkflow
from elgar.application.repositories import (
    ActionReportRepository,
    AssignmentRepository,
    ReportNotifier,
    UserRepository,
)
from elgar.application.review_ledger import ReviewLedger
from elgar.config.settings import get_settings
from elgar.core.context import actor_id_ctx
from elgar.domain.models.user import User
from elgar.governance.audit_logger import AuditLogger
from elgar.infrastructure.database.assignment_repository_db import DbAssignmentRepository
from elgar.infrastructure.database.audit_repository_db import DbAuditRepository
from elgar.infrastructure.database.report_repository_db import DbActionReportRepository
from elgar.infrastructure.database.session import get_db
from elgar.infrastructure.database.user_repository_db import DbUserRepository
from elgar.infrastructure.messaging.rabbitmq_notifier import RabbitMQNotifier
from elgar.observability.metrics import MetricsCollector
from elgar.security.evaluator import PermissionEvaluator
from elgar.security.exceptions import UnauthenticatedError
from elgar.security.guard import ActionGuard, RouteGuard
from elgar.security.tokens import decode_access_token

_bearer = HTTPBearer(auto_error=False)
_evaluator = PermissionEvaluator()
_metrics = MetricsCollector()
_notifier: RabbitMQNotifier | None = None


def get_metrics() -> MetricsCollector:
    return _metrics


def get_evaluator() -> PermissionEvaluator:
    return _evaluator


def get_action_guard(
    evaluator: Annotated[PermissionEvaluator, Depends(get_evaluator)],
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
) -> ActionGuard:
    return ActionGuard(evaluator, metrics=metrics)


def get_route_guard(
    evaluator: Annotated[PermissionEvaluator, Depends(get_evaluator)],
) -> RouteGuard:
    settings = get_settings()
    return RouteGuard(
        evaluator,
        login_path=settings.login_path,
        default_redirect=settings.default_redirect,
    )


def get_notifier() -> Optional[ReportNotifier]:
    """Return singleton RabbitMQ notifier, or None when notifications are disabled."""
    global _notifier
    settings = get_settings()
    if not settings.notifications_enabled:
        return None
    if _notifier is None:
        _notifier = RabbitMQNotifier(settings.rabbitmq_url)
    return _notifier


def get_user_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> UserRepository:
    return DbUserRepository(db)


def get_report_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> ActionReportRepository:
    return DbActionReportRepository(db)


def get_assignment_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> AssignmentRepository:
    return DbAssignmentRepository(db)


def get_audit_logger(db: Annotated[AsyncSession, Depends(get_db)]) -> AuditLogger:
    return AuditLogger(repository=DbAuditRepository(db))


def get_privilege_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    guard: Annotated[ActionGuard, Depends(get_action_guard)],
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> PrivilegeService:
    return PrivilegeService(
        users=users,
        guard=guard,
        audit_logger=audit_logger,
        logger=logging.getLogger("elgar.privileges"),
    )


def get_report_workflow(
    reports: Annotated[ActionReportRepository, Depends(get_report_repository)],
    assignments: Annotated[AssignmentRepository, Depends(get_assignment_repository)],
    guard: Annotated[ActionGuard, Depends(get_action_guard)],
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
    notifier: Annotated[Optional[ReportNotifier], Depends(get_notifier)],
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
) -> ActionReportWorkflow:
    return ActionReportWorkflow(
        reports=reports,
        assignments=assignments,
        ledger=ReviewLedger(reports),
        guard=guard,
        audit_logger=audit_logger,
        logger=logging.getLogger("elgar.action_reports"),
        notifier=notifier,
        metrics=metrics,
    )


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
    privileges: Annotated[PrivilegeService, Depends(get_privilege_service)],
) -> User:
    """Bearer token -> active user with grants. Raises UnauthenticatedError otherwise."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token provided")
    user_id = decode_access_token(credentials.credentials)
    user = await privileges.load_user(user_id)
    if user is None:
        raise UnauthenticatedError("User not found")
    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated")
    request.state.user_id = user.id
    actor_id_ctx.set(user.id)
    return user


def require_permissions(*tokens: str) -> Callable[..., User]:
    """
    Endpoint guard: resolves the current user and checks that any one of tokens is held.
    The endpoint body is never entered on denial.
    """

    def dependency(
        user: Annotated[User, Depends(get_current_user)],
        guard: Annotated[ActionGuard, Depends(get_action_guard)],
    ) -> User:
        return guard.check(user, list(tokens))

    return dependency


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
