from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dorm_assignment.api.schemas_room import CamelModel, MessageRead, StudentRead
from dorm_assignment.core.config import settings
from dorm_assignment.core.security import (
    authenticate,
    get_current_student_id,
    get_optional_student_id,
    get_token,
    revoke_token,
    session_for_identity,
)
from dorm_assignment.db import get_db
from dorm_assignment.services import assignment as assignment_service
from dorm_assignment.services import audit as audit_service

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(CamelModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    student: StudentRead


class UserResponse(CamelModel):
    user: StudentRead


class CheckAuthResponse(CamelModel):
    is_authenticated: bool
    user: StudentRead | None = None


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)):
    student = authenticate(db, body.email, body.password)
    token = session_for_identity(student)

    audit_service.log_action(
        db,
        username=student.email,
        action="login",
        resource_type="student",
        resource_id=student.id,
    )
    db.commit()

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return LoginResponse(
        message="Logged in successfully",
        access_token=token,
        student=StudentRead.from_model(student),
    )


@router.post("/logout", response_model=MessageRead)
def logout(
    response: Response,
    token: str | None = Depends(get_token),
    student_id: int = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    revoke_token(db, token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
def get_user(
    student_id: int = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    student = assignment_service.get_student(db, student_id)
    return UserResponse(user=StudentRead.from_model(student))


@router.get("/check-auth", response_model=CheckAuthResponse)
def check_auth(
    student_id: int | None = Depends(get_optional_student_id),
    db: Session = Depends(get_db),
):
    if student_id is None:
        return CheckAuthResponse(is_authenticated=False)
    student = assignment_service.get_student(db, student_id)
    return CheckAuthResponse(is_authenticated=True, user=StudentRead.from_model(student))
