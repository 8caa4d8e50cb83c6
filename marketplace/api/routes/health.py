# marketplace/api/routes/health.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.user import User
from marketplace.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def check_db_connection(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.exception("Database connection failed")
        return False


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    is_db_connected = check_db_connection(db)
    return {
        "status": "healthy" if is_db_connected else "unhealthy",
        "message": "Database is connected" if is_db_connected else "Database is disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/private")
def private_data(current_user: User = Depends(get_current_user)):
    return {
        "message": "This is private",
        "user": UserResponse.model_validate(current_user),
    }
