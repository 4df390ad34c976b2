from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire (dormId, currentStudents...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DormRead(CamelModel):
    id: int
    name: str
    location: str | None = None


class StudentSummary(CamelModel):
    """What other students may see of an occupant: the name only."""
    id: int
    name: str


class RoomRead(CamelModel):
    id: int
    dorm_id: int
    number: str
    capacity: int
    current_students: list[StudentSummary] = []


class StudentRead(CamelModel):
    id: int
    name: str
    email: str
    assigned_room: int | None = None

    @classmethod
    def from_model(cls, student) -> "StudentRead":
        return cls(
            id=student.id,
            name=student.name,
            email=student.email,
            assigned_room=student.room_id,
        )


class MessageRead(BaseModel):
    message: str
