"""
Review schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from leetcoach.models.enums import ReviewResult
from leetcoach.schemas.card import CardResponse


class ReviewSubmitRequest(BaseModel):
    """Request to submit a graded review of a card."""
    user_id: int = Field(..., description="User ID")
    card_id: int = Field(..., description="Card being reviewed")
    result: ReviewResult = Field(..., description="pass, fail or partial")
    q: int = Field(..., ge=0, le=5, description="Self-graded quality, 0 (blackout) to 5 (perfect)")
    duration_sec: int = Field(..., ge=0, description="Time spent in seconds")
    error_types: List[str] = Field(default_factory=list, description="Kinds of mistakes made")
    notes: Optional[str] = Field(None, max_length=200, description="Optional note")
    today: Optional[date] = Field(None, description="Caller's local date; the next due date is counted from it. Defaults to the server date.")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "card_id": 42,
                "result": "pass",
                "q": 4,
                "duration_sec": 900,
                "error_types": ["off-by-one"],
                "notes": "Forgot the visited set at first"
            }
        }


class ReviewSubmitResponse(BaseModel):
    """Response from submitting a review."""
    ok: bool = True
    next_due: date
    card: CardResponse


class ReviewResponse(BaseModel):
    """Review response schema."""
    id: int
    problem_id: int
    card_id: int
    mode: str
    started_at: datetime
    finished_at: datetime
    duration_sec: int
    result: str
    q: int
    error_types: List[str] = []
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ReviewListResponse(BaseModel):
    """Reviews ordered by finish time, newest first."""
    reviews: List[ReviewResponse]
