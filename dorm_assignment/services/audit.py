"""
Audit logging for room assignment changes and logins.
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from dorm_assignment.models import AuditLog


def log_action(
    db: Session,
    username: str,
    action: str,
    resource_type: str | None = None,
    resource_id: int | None = None,
    details: str | None = None,
) -> AuditLog:
    """
    Add an audit entry to the current transaction.

    The entry is not committed here: it is written together with the
    change it describes, so a rolled-back assignment leaves no trace.

    Args:
        db: Database session
        username: Email of the student who performed the action
        action: Action name (e.g., "room_assigned", "room_unassigned")
        resource_type: Type of resource affected (e.g., "room", "student")
        resource_id: ID of the resource affected
        details: Additional details about the action

    Returns:
        The pending AuditLog entry
    """
    log_entry = AuditLog(
        username=username,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
    )
    db.add(log_entry)
    return log_entry


def get_actions(
    db: Session,
    username: str | None = None,
    action: str | None = None,
    limit: int = 100,
) -> list[AuditLog]:
    """Most recent audit entries first, optionally filtered."""
    query = db.query(AuditLog)
    if username:
        query = query.filter(AuditLog.username == username)
    if action:
        query = query.filter(AuditLog.action == action)
    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
