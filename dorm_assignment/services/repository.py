"""
Persistence helpers shared by the service layer.

All reads and writes of Dorm/Room/Student records go through these
functions so that lookup failures and concurrent-write conflicts surface
as service errors instead of raw SQLAlchemy exceptions.
"""
from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import delete
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from dorm_assignment.core.errors import ConflictError, NotFound

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def find_by_id(db: Session, model: type[ModelT], record_id: int) -> ModelT:
    """Return the record with this primary key or raise NotFound."""
    record = db.get(model, record_id)
    if record is None:
        raise NotFound(f"{model.__name__} not found")
    return record


def find_many(db: Session, model: type[ModelT], order_by: Any = None, **filters) -> list[ModelT]:
    """
    Return all records of `model` matching the equality `filters`.

    Example:
        find_many(db, Room, dorm_id=3)
    """
    query = db.query(model).filter_by(**filters)
    query = query.order_by(order_by if order_by is not None else model.id)
    return query.all()


def save(db: Session, *records) -> None:
    """
    Persist `records` (and anything else pending in the session) in one
    transaction.

    Raises ConflictError when a versioned row was changed by another
    transaction after it was read; the session is rolled back first.
    """
    db.add_all(records)
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.info("Concurrent write detected: %s", e)
        raise ConflictError() from e


def delete_all(db: Session, model) -> int:
    """Remove every row of `model`. Seed/admin use only."""
    result = db.execute(delete(model))
    db.commit()
    return result.rowcount
