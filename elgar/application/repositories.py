"""Store protocols. Application layer depends on these; infrastructure implements them."""

from typing import Any, Dict, List, Optional, Protocol

from elgar.domain.models.action_report import ActionReport, ReportStatus
from elgar.domain.models.user import PermissionGrant, User


class UserRepository(Protocol):
    """Users and their explicit permission grants."""

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Return the user without grants, or None."""
        ...

    async def list_active_permissions(self, user_id: str) -> List[PermissionGrant]:
        ...

    async def save_grant(self, grant: PermissionGrant) -> PermissionGrant:
        ...

    async def deactivate_grant(self, user_id: str, permission: str) -> bool:
        """Soft-revoke the active grant. Returns False if there was none."""
        ...

    async def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        ...


class ActionReportRepository(Protocol):
    """Single-row atomic reads and writes of action_reports."""

    async def get_report_by_id(self, report_id: str) -> Optional[ActionReport]:
        ...

    async def find_report(self, event_id: str, volunteer_id: str) -> Optional[ActionReport]:
        ...

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        volunteer_id: Optional[str] = None,
    ) -> List[ActionReport]:
        """Newest first."""
        ...

    async def insert_report(self, fields: Dict[str, Any]) -> ActionReport:
        ...

    async def update_report(
        self,
        report_id: str,
        fields: Dict[str, Any],
        expected_status: Optional[ReportStatus] = None,
    ) -> Optional[ActionReport]:
        """
        Apply fields in one update. With expected_status, only if the row still has that status.
        Returns the updated report, or None when no row matched.
        """
        ...


class AssignmentRepository(Protocol):
    """Which volunteers are assigned to which events."""

    async def is_assigned(self, event_id: str, volunteer_id: str) -> bool:
        ...

    async def list_assigned_event_ids(self, volunteer_id: str) -> List[str]:
        ...


class ReportNotifier(Protocol):
    """Fire-and-forget notification channel for report transitions."""

    async def publish(self, routing_key: str, message: Dict[str, Any]) -> None:
        ...
