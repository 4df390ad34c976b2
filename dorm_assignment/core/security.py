from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy.orm import Session

from dorm_assignment.core.config import settings
from dorm_assignment.core.errors import InvalidCredentials, Unauthorized
from dorm_assignment.db import get_db
from dorm_assignment.models import RevokedToken, Student

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Compared against when the email is unknown, so both failure paths cost
# one bcrypt check.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt())


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def authenticate(db: Session, email: str, password: str) -> Student:
    """
    Return the student owning these credentials.

    Unknown email and wrong password raise the same InvalidCredentials.
    """
    student = db.query(Student).filter(Student.email == email).first()
    if student is None:
        verify_password(password, _DUMMY_HASH.decode("utf-8"))
        raise InvalidCredentials()
    if not verify_password(password, student.password_hash):
        raise InvalidCredentials()
    return student


def session_for_identity(student: Student) -> str:
    """Issue a signed session token for the student."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(student.id),
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)).timestamp()),
    }
    return jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def _decode(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        raise Unauthorized()
    if not payload.get("sub") or not payload.get("jti"):
        raise Unauthorized()
    return payload


def identity_for_token(db: Session, token: str) -> int:
    """Resolve a session token to a student id, or raise Unauthorized."""
    payload = _decode(token)
    if db.get(RevokedToken, payload["jti"]) is not None:
        raise Unauthorized()
    try:
        student_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise Unauthorized()
    # Student removed since the token was issued
    if db.get(Student, student_id) is None:
        raise Unauthorized()
    return student_id


def revoke_token(db: Session, token: str) -> None:
    """Invalidate a session token before its expiry (logout)."""
    payload = _decode(token)
    if db.get(RevokedToken, payload["jti"]) is None:
        db.add(RevokedToken(jti=payload["jti"], student_id=int(payload["sub"])))
        db.commit()


def get_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """Bearer header first, then the session cookie set by /login."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_student_id(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> int:
    if not token:
        raise Unauthorized()
    return identity_for_token(db, token)


def get_optional_student_id(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> int | None:
    if not token:
        return None
    try:
        return identity_for_token(db, token)
    except Unauthorized:
        return None
