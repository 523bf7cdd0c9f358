"""Immutable audit logging of report transitions and privilege changes. No FastAPI."""

from datetime import datetime, timezone

from elgar.governance.audit_models import AuditRecord
from elgar.governance.audit_repository import AuditRepository


class AuditLogger:
    """
    Writes immutable audit records via repository.
    Must include: who, what, when (UTC), why, correlation_id.
    """

    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    async def log_action(
        self,
        *,
        actor: str,
        action: str,
        resource_type: str,
        resource_id: str,
        reason: str | None,
        correlation_id: str,
        metadata: dict | None,
    ) -> None:
        """Write immutable audit record. Timestamp is UTC."""
        record = AuditRecord(
            actor=actor,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            reason=reason,
            correlation_id=correlation_id,
            metadata=metadata,
            timestamp_utc=datetime.now(timezone.utc),
        )
        await self._repository.save(record)
