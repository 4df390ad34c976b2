from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dorm_assignment.api.schemas_room import MessageRead
from dorm_assignment.core.security import get_current_student_id
from dorm_assignment.db import get_db
from dorm_assignment.services import assignment as assignment_service

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.post("/unassign", response_model=MessageRead)
def unassign_room(
    db: Session = Depends(get_db),
    student_id: int = Depends(get_current_student_id),
):
    assignment_service.unassign_student(db, student_id)
    return {"message": "Successfully unassigned from the room"}


@router.post("/{room_id}/assign", response_model=MessageRead)
def assign_room(
    room_id: int,
    db: Session = Depends(get_db),
    student_id: int = Depends(get_current_student_id),
):
    assignment_service.assign_student_to_room(db, student_id, room_id)
    return {"message": "Room assigned successfully"}
