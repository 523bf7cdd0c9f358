"""DB-backed action reports. Every write is a single-row statement."""

from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from elgar.application.exceptions import DuplicateReportError
from elgar.domain.models.action_report import ActionReport, ReportStatus
from elgar.infrastructure.database.models import ActionReportRow
from elgar.infrastructure.database.repository import SqlRepository, store_operation

_COLUMNS = (
    "event_id",
    "volunteer_id",
    "status",
    "has_partner",
    "partner_name",
    "partner_id_number",
    "partner_phone",
    "volunteer_role",
    "full_report",
    "digital_signature",
    "signature_timestamp",
    "review_notes",
    "reviewed_by",
    "reviewed_at",
)


def _to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: (v.value if isinstance(v, Enum) else v)
        for k, v in fields.items()
        if k in _COLUMNS
    }


def _to_report(orm: ActionReportRow) -> ActionReport:
    return ActionReport(
        id=orm.id,
        event_id=orm.event_id,
        volunteer_id=orm.volunteer_id,
        status=ReportStatus(orm.status),
        full_report=orm.full_report,
        digital_signature=bool(orm.digital_signature),
        volunteer_role=orm.volunteer_role,
        has_partner=bool(orm.has_partner),
        partner_name=orm.partner_name,
        partner_id_number=orm.partner_id_number,
        partner_phone=orm.partner_phone,
        signature_timestamp=orm.signature_timestamp,
        review_notes=orm.review_notes,
        reviewed_by=orm.reviewed_by,
        reviewed_at=orm.reviewed_at,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


class DbActionReportRepository(SqlRepository):
    """Implements ActionReportRepository protocol over the action_reports table."""

    @store_operation
    async def get_report_by_id(self, report_id: str) -> Optional[ActionReport]:
        orm = await self._session.get(ActionReportRow, report_id)
        return _to_report(orm) if orm is not None else None

    @store_operation
    async def find_report(self, event_id: str, volunteer_id: str) -> Optional[ActionReport]:
        stmt = select(ActionReportRow).where(
            ActionReportRow.event_id == event_id,
            ActionReportRow.volunteer_id == volunteer_id,
        )
        result = await self._session.execute(stmt)
        orm = result.scalar_one_or_none()
        return _to_report(orm) if orm is not None else None

    @store_operation
    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        volunteer_id: Optional[str] = None,
    ) -> List[ActionReport]:
        stmt = select(ActionReportRow).order_by(ActionReportRow.created_at.desc())
        if status is not None:
            stmt = stmt.where(ActionReportRow.status == status.value)
        if volunteer_id is not None:
            stmt = stmt.where(ActionReportRow.volunteer_id == volunteer_id)
        result = await self._session.execute(stmt)
        return [_to_report(row) for row in result.scalars().all()]

    @store_operation
    async def insert_report(self, fields: Dict[str, Any]) -> ActionReport:
        orm = ActionReportRow(**_to_columns(fields))
        self._session.add(orm)
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateReportError(
                f"Report already exists for event {fields.get('event_id')}"
            ) from e
        await self._session.refresh(orm)
        return _to_report(orm)

    @store_operation
    async def update_report(
        self,
        report_id: str,
        fields: Dict[str, Any],
        expected_status: Optional[ReportStatus] = None,
    ) -> Optional[ActionReport]:
        stmt = update(ActionReportRow).where(ActionReportRow.id == report_id)
        if expected_status is not None:
            stmt = stmt.where(ActionReportRow.status == expected_status.value)
        stmt = stmt.values(**_to_columns(fields)).returning(ActionReportRow)
        result = await self._session.execute(stmt)
        orm = result.scalar_one_or_none()
        await self._session.commit()
        return _to_report(orm) if orm is not None else None
