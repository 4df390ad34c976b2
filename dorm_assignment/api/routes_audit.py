from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dorm_assignment.api.schemas_room import CamelModel
from dorm_assignment.core.security import get_current_student_id
from dorm_assignment.db import get_db
from dorm_assignment.services import assignment as assignment_service
from dorm_assignment.services import audit as audit_service

router = APIRouter(
    prefix="/audit-logs",
    tags=["audit"],
)


class AuditLogRead(CamelModel):
    id: int
    username: str
    action: str
    resource_type: str | None = None
    resource_id: int | None = None
    details: str | None = None
    created_at: datetime


@router.get("/me", response_model=List[AuditLogRead])
def list_my_audit_logs(
    action: str | None = Query(None, description="Filter by action"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of results"),
    student_id: int = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    """Login and room history of the current student, most recent first."""
    student = assignment_service.get_student(db, student_id)
    return audit_service.get_actions(db, username=student.email, action=action, limit=limit)
