"""Fixtures for application-layer tests: workflow and privilege service over in-memory stores."""

import logging
from datetime import datetime, timezone

import pytest

from elgar.application.privilege_service import PrivilegeService
from elgar.application.report_workflow import ActionReportWorkflow
from elgar.application.review_ledger import ReviewLedger
from elgar.domain.models.action_report import ActionReport, ReportStatus
from elgar.domain.schemas.action_report import ReportContent
from elgar.observability.metrics import MetricsCollector
from elgar.security.evaluator import PermissionEvaluator
from elgar.security.guard import ActionGuard


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def guard(metrics):
    return ActionGuard(PermissionEvaluator(), metrics=metrics)


@pytest.fixture
def workflow(report_store, assignments, guard, audit_logger, notifier, metrics):
    return ActionReportWorkflow(
        reports=report_store,
        assignments=assignments,
        ledger=ReviewLedger(report_store),
        guard=guard,
        audit_logger=audit_logger,
        logger=logging.getLogger("test.action_reports"),
        notifier=notifier,
        metrics=metrics,
    )


@pytest.fixture
def privileges(user_store, guard, audit_logger):
    return PrivilegeService(
        users=user_store,
        guard=guard,
        audit_logger=audit_logger,
        logger=logging.getLogger("test.privileges"),
    )


@pytest.fixture
def content():
    return ReportContent(
        full_report="Patrol on the north road, no incidents.",
        digital_signature=True,
    )


@pytest.fixture
def stored_report(report_store, patrol):
    """Persist a report for patrol on evt-1 in the given status."""

    def _make(status=ReportStatus.SUBMITTED, **overrides):
        now = datetime.now(timezone.utc)
        fields = dict(
            id="r-1",
            event_id="evt-1",
            volunteer_id=patrol.id,
            status=status,
            full_report="Patrol on the north road.",
            digital_signature=True,
            volunteer_role=patrol.role,
            created_at=now,
            updated_at=now,
        )
        fields.update(overrides)
        return report_store.put(ActionReport(**fields))

    return _make
