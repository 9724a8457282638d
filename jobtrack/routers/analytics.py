import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobtrack.database import get_db
from jobtrack.dependencies import get_current_user
from jobtrack.models.user import User
from jobtrack.repos.application_repo import all_for_user
from jobtrack.schemas.application import AnalyticsResponse
from jobtrack.services.analytics_service import compute_analytics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return compute_analytics(all_for_user(db, user.id))
    except Exception as e:
        logger.exception("Analytics failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load analytics") from e
