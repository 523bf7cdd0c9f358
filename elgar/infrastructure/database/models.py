# elgar/infrastructure/database/models.py

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from elgar.infrastructure.database.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class TimestampedModel(Base):
    __abstract__ = True

    id = Column(String(36), primary_key=True, default=_uuid)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class UserRow(TimestampedModel):
    """Users are deactivated, never deleted."""

    __tablename__ = "users"

    username = Column(String, unique=True, nullable=True)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class UserPermissionRow(Base):
    """One row per grant. is_active=False is a soft revoke."""

    __tablename__ = "user_permissions"
    __table_args__ = (
        # At most one active grant per (user_id, permission).
        Index(
            "uq_user_permissions_active",
            "user_id",
            "permission",
            unique=True,
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    permission = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    granted_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    granted_at = Column(DateTime(timezone=True), server_default=func.now())


class EventAssignmentRow(Base):
    __tablename__ = "event_volunteer_assignments"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), nullable=False, index=True)
    volunteer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())


class ActionReportRow(TimestampedModel):
    """ORM model for action reports. Review columns hold only the latest decision."""

    __tablename__ = "action_reports"
    __table_args__ = (
        Index("uq_action_reports_event_volunteer", "event_id", "volunteer_id", unique=True),
    )

    event_id = Column(String(36), nullable=False, index=True)
    volunteer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, index=True)
    has_partner = Column(Boolean, nullable=False, default=False)
    partner_name = Column(String, nullable=True)
    partner_id_number = Column(String, nullable=True)
    partner_phone = Column(String, nullable=True)
    volunteer_role = Column(String, nullable=True)
    full_report = Column(Text, nullable=False)
    digital_signature = Column(Boolean, nullable=False, default=False)
    signature_timestamp = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)


class AuditLogRow(Base):
    """Append-only audit trail."""

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=_uuid)
    actor = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False)
    resource_type = Column(String, nullable=False)
    resource_id = Column(String, nullable=False, index=True)
    reason = Column(Text, nullable=True)
    correlation_id = Column(String, nullable=False)
    metadata_ = Column("metadata", JSONB, nullable=True)
    timestamp_utc = Column(DateTime(timezone=True), nullable=False)
