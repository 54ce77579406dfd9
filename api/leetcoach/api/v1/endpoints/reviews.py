"""
Review endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from typing import Optional
from datetime import datetime
import logging

from leetcoach.core.database import get_session
from leetcoach.schemas.card import CardResponse
from leetcoach.schemas.review import (
    ReviewSubmitRequest,
    ReviewSubmitResponse,
    ReviewResponse,
    ReviewListResponse
)
from leetcoach.services.review_service import submit_review, list_reviews
from leetcoach.api.v1.endpoints.utils import local_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewSubmitResponse, status_code=status.HTTP_200_OK)
async def create_review(
    request: ReviewSubmitRequest,
    session: Session = Depends(get_session)
):
    """
    Submit a graded review.

    This endpoint:
    1. Looks up the card and its problem (404 if missing or not owned)
    2. Computes the card's next state with the SM-2 scheduler
    3. Records the review and writes the new card state in one transaction

    A concurrent update of the same card returns 409; the client may retry.
    """
    outcome = submit_review(
        session,
        user_id=request.user_id,
        card_id=request.card_id,
        result=request.result.value,
        q=request.q,
        duration_sec=request.duration_sec,
        error_types=request.error_types,
        notes=request.notes,
        today=local_today(request.today),
    )
    return ReviewSubmitResponse(
        next_due=outcome.next_due,
        card=CardResponse.model_validate(outcome.card),
    )


@router.get("", response_model=ReviewListResponse)
async def get_reviews(
    user_id: int,
    finished_from: Optional[datetime] = Query(None, alias="from"),
    finished_to: Optional[datetime] = Query(None, alias="to"),
    session: Session = Depends(get_session)
):
    """List the user's reviews, optionally limited to a finish-time range."""
    reviews = list_reviews(session, user_id, finished_from, finished_to)
    return ReviewListResponse(reviews=[ReviewResponse.model_validate(review) for review in reviews])
