"""
Card endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from leetcoach.core.database import get_session
from leetcoach.schemas.card import CardRescheduleRequest, CardRescheduleResponse
from leetcoach.services.problem_service import reschedule_card

router = APIRouter(prefix="/cards", tags=["cards"])


@router.patch("/{card_id}", response_model=CardRescheduleResponse)
async def update_card_due_date(
    card_id: int,
    request: CardRescheduleRequest,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Move a card to a different due date without recording a review."""
    card = reschedule_card(session, user_id, card_id, request.due_at)
    return CardRescheduleResponse(due_at=card.due_at)
