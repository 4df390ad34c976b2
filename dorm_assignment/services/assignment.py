"""
Room assignment rules.

A student's room is stored once, in ``students.room_id``; the occupants of a
room are always derived from that column. Every occupancy change stamps the
affected rooms so their version counters move, which makes the capacity
check and the write that follows it fail together when another transaction
got there first. Such conflicts are retried from a fresh read.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from dorm_assignment.core.config import settings
from dorm_assignment.core.errors import (
    CapacityExceeded,
    ConflictError,
    NotAssigned,
    OrphanReference,
)
from dorm_assignment.models import Dorm, Room, Student
from dorm_assignment.services import audit as audit_service
from dorm_assignment.services.repository import find_by_id, find_many, save

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _with_retries(db: Session, operation: Callable[..., T], *args) -> T:
    retries = max(settings.ASSIGNMENT_MAX_RETRIES, 0)
    attempt = 0
    while True:
        try:
            return operation(db, *args)
        except ConflictError:
            attempt += 1
            if attempt > retries:
                logger.warning("%s gave up after %d conflicting attempts", operation.__name__, attempt)
                raise
            logger.info("%s conflicted, retrying (%d/%d)", operation.__name__, attempt, retries)


def _stamp(room: Room) -> None:
    room.updated_at = datetime.now(timezone.utc)


def count_occupants(db: Session, room_id: int) -> int:
    return (
        db.query(func.count(Student.id))
        .filter(Student.room_id == room_id)
        .scalar()
    )


def _assign(db: Session, student_id: int, room_id: int) -> Room:
    room = find_by_id(db, Room, room_id)
    student = find_by_id(db, Student, student_id)

    if count_occupants(db, room.id) >= room.capacity:
        raise CapacityExceeded()

    if student.room_id == room.id:
        logger.info("Student %s already in room %s", student.id, room.id)
        return room

    touched: list[Room] = []
    if student.room_id is not None:
        old_room = db.get(Room, student.room_id)
        if old_room is None:
            logger.warning(
                "Student %s referenced missing room %s; replacing the reference",
                student.id,
                student.room_id,
            )
            audit_service.log_action(
                db,
                username=student.email,
                action="orphan_reconciled",
                resource_type="student",
                resource_id=student.id,
                details=f"Dropped reference to missing room {student.room_id}",
            )
        else:
            _stamp(old_room)
            touched.append(old_room)

    previous_room_id = student.room_id
    student.room_id = room.id
    _stamp(room)
    audit_service.log_action(
        db,
        username=student.email,
        action="room_assigned",
        resource_type="room",
        resource_id=room.id,
        details=f"Moved from room {previous_room_id}" if previous_room_id else None,
    )
    save(db, *touched, room, student)
    logger.info("Assigned student %s to room %s (previous: %s)", student.id, room.id, previous_room_id)
    return room


def assign_student_to_room(db: Session, student_id: int, room_id: int) -> Room:
    """
    Put the student in the room, moving them out of any previous room.

    Raises NotFound if the room (or student) does not exist, CapacityExceeded
    if the room is full (even when it is the student's own room), ConflictError
    if concurrent writers kept winning. Assigning a student to their own room
    while it has a free bed changes nothing.
    """
    return _with_retries(db, _assign, student_id, room_id)


def _unassign(db: Session, student_id: int) -> Room:
    student = find_by_id(db, Student, student_id)
    if student.room_id is None:
        raise NotAssigned()

    room = db.get(Room, student.room_id)
    if room is None:
        missing_room_id = student.room_id
        logger.warning(
            "Student %s referenced missing room %s; clearing the reference",
            student.id,
            missing_room_id,
        )
        student.room_id = None
        audit_service.log_action(
            db,
            username=student.email,
            action="orphan_reconciled",
            resource_type="student",
            resource_id=student.id,
            details=f"Dropped reference to missing room {missing_room_id}",
        )
        save(db, student)
        raise OrphanReference()

    student.room_id = None
    _stamp(room)
    audit_service.log_action(
        db,
        username=student.email,
        action="room_unassigned",
        resource_type="room",
        resource_id=room.id,
    )
    save(db, room, student)
    logger.info("Unassigned student %s from room %s", student.id, room.id)
    return room


def unassign_student(db: Session, student_id: int) -> Room:
    """
    Remove the student from their room and return that room.

    Raises NotAssigned if the student has no room. A reference to a room that
    no longer exists is cleared and reported as OrphanReference.
    """
    return _with_retries(db, _unassign, student_id)


def list_dorms(db: Session) -> list[Dorm]:
    return find_many(db, Dorm)


def list_rooms_for_dorm(db: Session, dorm_id: int) -> list[Room]:
    """Rooms of a dorm with their occupants loaded. Unknown dorms yield []."""
    return (
        db.query(Room)
        .options(selectinload(Room.current_students))
        .filter(Room.dorm_id == dorm_id)
        .order_by(Room.id)
        .all()
    )


def get_student(db: Session, student_id: int) -> Student:
    return find_by_id(db, Student, student_id)


def reconcile_orphans(db: Session) -> list[int]:
    """
    Clear every student room reference that points at a missing room.

    Returns the ids of the students that were fixed.
    """
    orphans = (
        db.query(Student)
        .outerjoin(Room, Student.room_id == Room.id)
        .filter(Student.room_id.isnot(None), Room.id.is_(None))
        .all()
    )
    for student in orphans:
        logger.warning(
            "Reconciling student %s: room %s no longer exists",
            student.id,
            student.room_id,
        )
        audit_service.log_action(
            db,
            username=student.email,
            action="orphan_reconciled",
            resource_type="student",
            resource_id=student.id,
            details=f"Dropped reference to missing room {student.room_id}",
        )
        student.room_id = None

    if orphans:
        save(db, *orphans)
    return [s.id for s in orphans]
