# dorm_assignment/models.py
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from dorm_assignment.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Dorm(Base):
    __tablename__ = "dorms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=True)

    rooms = relationship("Room", back_populates="dorm", order_by="Room.id")


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    dorm_id = Column(Integer, ForeignKey("dorms.id"), nullable=False, index=True)
    number = Column(String(20), nullable=False)
    capacity = Column(Integer, nullable=False)

    # Bumped on every occupancy change; the version counter guards the
    # capacity check against concurrent writers.
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1)

    dorm = relationship("Dorm", back_populates="rooms")
    # Occupancy is derived from students.room_id, never stored twice.
    current_students = relationship(
        "Student",
        order_by="Student.id",
        viewonly=True,
    )

    __mapper_args__ = {"version_id_col": version}


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(100), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(320), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(Integer, nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    student_id = Column(Integer, nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
