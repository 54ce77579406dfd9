"""
Review queue schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from leetcoach.schemas.card import CardResponse


class QueueProblem(BaseModel):
    """Problem details shown alongside a queued card."""
    id: int
    title: str
    url: str
    difficulty: str
    tags: List[str] = []

    class Config:
        from_attributes = True


class QueueItem(CardResponse):
    """A card in the review queue with its problem."""
    problem: Optional[QueueProblem] = None


class ReviewQueueResponse(BaseModel):
    """Due cards in queue order."""
    reference_date: date
    items: List[QueueItem]


class ReviewWeekResponse(BaseModel):
    """Cards due in a date range; overdue cards included when the range starts today."""
    items: List[QueueItem]
    from_date: date = Field(..., serialization_alias="from")
    to_date: date = Field(..., serialization_alias="to")
