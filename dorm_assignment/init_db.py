# dorm_assignment/init_db.py
import logging

from dorm_assignment.db import Base, SessionLocal, engine
from dorm_assignment import models  # noqa: F401
from dorm_assignment.services.assignment import reconcile_orphans

logger = logging.getLogger(__name__)


def init_db(bind=None):
    logger.info("Creating tables in database...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Done.")


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        fixed = reconcile_orphans(db)
        logger.info("Reconciled %d orphaned room references", len(fixed))
    finally:
        db.close()


if __name__ == "__main__":
    main()
