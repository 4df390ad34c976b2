"""
Reset the database to the demo data set: two dorms, four rooms, two students.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dorm_assignment.core.security import hash_password
from dorm_assignment.db import SessionLocal
from dorm_assignment.init_db import init_db
from dorm_assignment.models import AuditLog, Dorm, RevokedToken, Room, Student
from dorm_assignment.services.assignment import assign_student_to_room
from dorm_assignment.services.repository import delete_all, save

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


def seed_database(db: Session) -> dict[str, int]:
    """
    Clear all tables and insert the demo data set.

    Returns a mapping of readable keys to the new row ids.
    """
    # Children first
    for model in (AuditLog, RevokedToken, Student, Room, Dorm):
        delete_all(db, model)

    sunset = Dorm(name="Sunset Hall", location="West Campus")
    lakeside = Dorm(name="Lakeside Dorm", location="East Campus")
    save(db, sunset, lakeside)

    rooms = {
        "101": Room(dorm_id=sunset.id, number="101", capacity=2),
        "102": Room(dorm_id=sunset.id, number="102", capacity=2),
        "201": Room(dorm_id=lakeside.id, number="201", capacity=1),
        "202": Room(dorm_id=lakeside.id, number="202", capacity=3),
    }
    save(db, *rooms.values())

    password_hash = hash_password(DEMO_PASSWORD)
    john = Student(name="John Doe", email="john@example.com", password_hash=password_hash)
    jane = Student(name="Jane Smith", email="jane@example.com", password_hash=password_hash)
    save(db, john, jane)

    assign_student_to_room(db, john.id, rooms["101"].id)

    ids = {
        "sunset_hall": sunset.id,
        "lakeside_dorm": lakeside.id,
        "john": john.id,
        "jane": jane.id,
    }
    ids.update({f"room_{number}": room.id for number, room in rooms.items()})
    return ids


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        seed_database(db)
        logger.info("Database seeded successfully!")
    finally:
        db.close()


if __name__ == "__main__":
    main()
