"""Governance: immutable audit trail. No FastAPI."""

from elgar.governance.audit_logger import AuditLogger
from elgar.governance.audit_models import AuditRecord

__all__ = [
    "AuditLogger",
    "AuditRecord",
]
