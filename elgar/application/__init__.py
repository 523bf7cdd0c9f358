# Application layer: services that orchestrate domain, security and infrastructure.

from elgar.application.exceptions import (
    ApplicationError,
    DuplicateReportError,
    NotFoundError,
    StoreFailureError,
)
from elgar.application.privilege_service import PrivilegeService
from elgar.application.report_workflow import ActionReportWorkflow
from elgar.application.repositories import (
    ActionReportRepository,
    AssignmentRepository,
    ReportNotifier,
    UserRepository,
)
from elgar.application.review_ledger import ReviewLedger

__all__ = [
    "ActionReportRepository",
    "ActionReportWorkflow",
    "ApplicationError",
    "AssignmentRepository",
    "DuplicateReportError",
    "NotFoundError",
    "PrivilegeService",
    "ReportNotifier",
    "ReviewLedger",
    "StoreFailureError",
    "UserRepository",
]
