"""
Card schemas.
"""
from pydantic import BaseModel, Field
from datetime import date, datetime


class CardResponse(BaseModel):
    """Card response schema."""
    id: int
    problem_id: int
    state: str
    ease_factor: float
    interval_days: int
    repetitions: int
    lapses: int
    due_at: date
    last_q: int
    created_at: datetime

    class Config:
        from_attributes = True


class CardRescheduleRequest(BaseModel):
    """Request to move a card's due date by hand."""
    due_at: date = Field(..., description="New due date (YYYY-MM-DD)")

    class Config:
        json_schema_extra = {
            "example": {
                "due_at": "2024-01-05"
            }
        }


class CardRescheduleResponse(BaseModel):
    """Response from rescheduling a card."""
    ok: bool = True
    due_at: date
