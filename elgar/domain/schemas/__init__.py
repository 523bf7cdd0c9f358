"""Domain schemas. Request/response and validation."""

from elgar.domain.schemas.action_report import (
    ActionReportResponse,
    ActionReportResubmitRequest,
    ActionReportSubmitRequest,
    ReportContent,
    ReviewRequest,
)
from elgar.domain.schemas.permissions import (
    ActiveChangeRequest,
    AvailablePermission,
    GrantRequest,
    GuardDecisionResponse,
    ManageableRolesResponse,
    MyPermissionsResponse,
    NavigationItem,
    PermissionGrantResponse,
    PermissionsReplaceRequest,
    RoleChangeRequest,
)

__all__ = [
    "ActionReportResponse",
    "ActionReportResubmitRequest",
    "ActionReportSubmitRequest",
    "ActiveChangeRequest",
    "AvailablePermission",
    "GrantRequest",
    "GuardDecisionResponse",
    "ManageableRolesResponse",
    "MyPermissionsResponse",
    "NavigationItem",
    "PermissionGrantResponse",
    "PermissionsReplaceRequest",
    "ReportContent",
    "ReviewRequest",
    "RoleChangeRequest",
]
