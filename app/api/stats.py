"""
Usage statistics API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from app.database import get_db
from app.schemas.stats import UserStatsResponse
from app.services.stats_service import stats_service

router = APIRouter(prefix="/api", tags=["stats"])
logger = logging.getLogger(__name__)


@router.get("/users/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: UUID,
    db: Session = Depends(get_db)
):
    """
    Quiz and book counters for a user

    Returns:
    - Total, public, private, normal and quick quiz counts
    - Total, public and private book counts
    """
    logger.info(f"Fetching usage stats for user {user_id}")
    return UserStatsResponse(**stats_service.get_user_stats(db, user_id))
