from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from customer_profiles.database import engine, mask_db_url
from customer_profiles.config import build_sqlalchemy_db_url, settings


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime


class DBHealthStatus(BaseModel):
    orm: str
    orm_db_url: str
    timestamp: datetime


@router.get("/", response_model=HealthStatus, summary="API heartbeat")
def health_check() -> HealthStatus:
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/db", response_model=DBHealthStatus, summary="DB connectivity checks")
def db_health_check() -> DBHealthStatus:
    orm_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        orm_status = "error"

    return DBHealthStatus(
        orm=orm_status,
        orm_db_url=mask_db_url(build_sqlalchemy_db_url(settings)),
        timestamp=datetime.now(timezone.utc),
    )
