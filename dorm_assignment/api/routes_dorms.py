from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dorm_assignment.api.schemas_room import DormRead, RoomRead
from dorm_assignment.db import get_db
from dorm_assignment.services import assignment as assignment_service

router = APIRouter(prefix="/dorms", tags=["dorms"])


@router.get("", response_model=List[DormRead])
def list_dorms(db: Session = Depends(get_db)):
    return assignment_service.list_dorms(db)


@router.get("/{dorm_id}/rooms", response_model=List[RoomRead])
def list_rooms_for_dorm(dorm_id: int, db: Session = Depends(get_db)):
    """Rooms of a dorm; occupants are listed by name only."""
    return assignment_service.list_rooms_for_dorm(db, dorm_id)
