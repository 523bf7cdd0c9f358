"""DB-backed audit repository. Insert only."""

from elgar.governance.audit_models import AuditRecord
from elgar.infrastructure.database.models import AuditLogRow
from elgar.infrastructure.database.repository import SqlRepository, store_operation


class DbAuditRepository(SqlRepository):
    """Implements AuditRepository protocol."""

    @store_operation
    async def save(self, record: AuditRecord) -> None:
        self._session.add(
            AuditLogRow(
                actor=record.actor,
                action=record.action,
                resource_type=record.resource_type,
                resource_id=record.resource_id,
                reason=record.reason,
                correlation_id=record.correlation_id,
                metadata_=record.metadata,
                timestamp_utc=record.timestamp_utc,
            )
        )
        await self._session.commit()
