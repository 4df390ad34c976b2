import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dorm_assignment.api.routes_audit import router as audit_router
from dorm_assignment.api.routes_auth import router as auth_router
from dorm_assignment.api.routes_dorms import router as dorms_router
from dorm_assignment.api.routes_rooms import router as rooms_router
from dorm_assignment.core.config import settings
from dorm_assignment.core.errors import DormServiceError, dorm_service_error_handler
from dorm_assignment.db import Base, SessionLocal, engine
from dorm_assignment import models  # noqa: F401  (registers tables)
from dorm_assignment.services.assignment import reconcile_orphans

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        fixed = reconcile_orphans(db)
        if fixed:
            logger.warning("Cleared dangling room references for students %s", fixed)
    finally:
        db.close()
    yield


app = FastAPI(title="Dorm Assignment Service", lifespan=lifespan)
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(DormServiceError, dorm_service_error_handler)

app.include_router(auth_router)
app.include_router(dorms_router)
app.include_router(rooms_router)
app.include_router(audit_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
