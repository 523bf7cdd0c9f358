"""DB-backed event assignments (event_volunteer_assignments table). Read-only here."""

from typing import List

from sqlalchemy import select

from elgar.infrastructure.database.models import EventAssignmentRow
from elgar.infrastructure.database.repository import SqlRepository, store_operation


class DbAssignmentRepository(SqlRepository):
    """Implements AssignmentRepository protocol."""

    @store_operation
    async def is_assigned(self, event_id: str, volunteer_id: str) -> bool:
        stmt = (
            select(EventAssignmentRow.id)
            .where(
                EventAssignmentRow.event_id == event_id,
                EventAssignmentRow.volunteer_id == volunteer_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @store_operation
    async def list_assigned_event_ids(self, volunteer_id: str) -> List[str]:
        stmt = (
            select(EventAssignmentRow.event_id)
            .where(EventAssignmentRow.volunteer_id == volunteer_id)
            .order_by(EventAssignmentRow.assigned_at)
        )
        result = await self._session.execute(stmt)
        return list(dict.fromkeys(result.scalars().all()))
