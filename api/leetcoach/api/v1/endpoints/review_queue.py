"""
Review queue endpoints: today's queue and the calendar/week view.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from typing import Optional
from datetime import date, timedelta

from leetcoach.core.database import get_session
from leetcoach.schemas.queue import QueueItem, ReviewQueueResponse, ReviewWeekResponse
from leetcoach.services.queue_service import get_review_queue, get_review_week, DEFAULT_WEEK_DAYS
from leetcoach.api.v1.endpoints.utils import local_today

router = APIRouter(tags=["review-queue"])


@router.get("/review-queue", response_model=ReviewQueueResponse)
async def review_queue(
    user_id: int,
    queue_date: Optional[date] = Query(None, alias="date"),
    session: Session = Depends(get_session)
):
    """Cards due on or before the given date (default today), soonest first."""
    reference_date = local_today(queue_date)
    cards = get_review_queue(session, user_id, reference_date)
    return ReviewQueueResponse(
        reference_date=reference_date,
        items=[QueueItem.model_validate(card) for card in cards],
    )


@router.get("/review-week", response_model=ReviewWeekResponse)
async def review_week(
    user_id: int,
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    today: Optional[date] = None,
    session: Session = Depends(get_session)
):
    """
    Cards due in [from, to]; from defaults to today and to to six days later.

    When the range starts today, overdue cards are included as well.
    """
    today = local_today(today)
    start = from_date or today
    end = to_date or start + timedelta(days=DEFAULT_WEEK_DAYS - 1)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="'to' must not be before 'from'"
        )

    cards = get_review_week(session, user_id, today, start, end)
    return ReviewWeekResponse(
        items=[QueueItem.model_validate(card) for card in cards],
        from_date=start,
        to_date=end,
    )
