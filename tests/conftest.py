"""Shared fixtures: an in-memory database, the demo data set and an API client."""

import os

# Must be set before dorm_assignment is imported: the engine is built at import.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from dorm_assignment.db import Base, SessionLocal, engine, make_engine
from dorm_assignment.main import app
from dorm_assignment.models import Dorm, Room, Student
from dorm_assignment.seed_db import DEMO_PASSWORD, seed_database


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded(db):
    """Demo data: John in room 101, Jane unassigned, rooms 102/201/202 empty."""
    return seed_database(db)


@pytest.fixture
def client(seeded):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    def _login(email="jane@example.com", password=DEMO_PASSWORD):
        resp = client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['accessToken']}"}

    return _login


@pytest.fixture
def file_sessions(tmp_path):
    """
    Session factory on a file-backed SQLite database, so that independent
    sessions see each other's commits like concurrent requests would.

    Holds one dorm, a single-bed room and two unassigned students.
    """
    file_engine = make_engine(f"sqlite:///{tmp_path / 'dorms.db'}")
    Base.metadata.create_all(bind=file_engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)

    setup = factory()
    dorm = Dorm(name="Sunset Hall", location="West Campus")
    setup.add(dorm)
    setup.flush()
    single = Room(dorm_id=dorm.id, number="201", capacity=1)
    double = Room(dorm_id=dorm.id, number="202", capacity=2)
    alice = Student(name="Alice", email="alice@example.com", password_hash="x")
    bob = Student(name="Bob", email="bob@example.com", password_hash="x")
    setup.add_all([single, double, alice, bob])
    setup.commit()
    ids = {"single": single.id, "double": double.id, "alice": alice.id, "bob": bob.id}
    setup.close()

    yield factory, ids
    file_engine.dispose()


@pytest.fixture
def check_invariants():
    """Capacity holds for every room and the room/student link agrees both ways."""

    def _check(session):
        session.expire_all()
        rooms = session.query(Room).all()
        students = session.query(Student).all()
        for room in rooms:
            occupant_ids = {s.id for s in room.current_students}
            assert len(occupant_ids) <= room.capacity
            for student in students:
                assert (student.room_id == room.id) == (student.id in occupant_ids)

    return _check
