"""
Review model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, List
from datetime import datetime


class Review(SQLModel, table=True):
    """Review table - append-only log of graded attempts."""
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    problem_id: int = Field(foreign_key="problems.id", index=True)
    card_id: int = Field(foreign_key="cards.id", index=True)
    mode: str  # 'learn' if the card had no repetitions before this review, else 'review'
    # Naive UTC
    started_at: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False))
    finished_at: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
    duration_sec: int = Field(default=0)
    result: str  # 'pass', 'fail' or 'partial'
    q: int  # Self-graded quality, 0-5
    error_types: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    notes: Optional[str] = Field(default=None, max_length=200)
