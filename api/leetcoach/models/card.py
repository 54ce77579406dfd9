"""
Card model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import CheckConstraint, Column, DateTime, UniqueConstraint
from typing import Optional, TYPE_CHECKING
from datetime import datetime, date

from leetcoach.utils.time_utils import utc_now

if TYPE_CHECKING:
    from leetcoach.models.problem import Problem


class Card(SQLModel, table=True):
    """Card table - spaced-repetition state of one problem for one user."""
    __tablename__ = "cards"
    __table_args__ = (
        UniqueConstraint("user_id", "problem_id", name="uq_cards_user_problem"),
        CheckConstraint("ease_factor >= 1.3", name="ck_cards_ease_factor_min"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    problem_id: int = Field(foreign_key="problems.id", index=True)
    state: str = Field(default="learning")  # 'learning' or 'review'
    ease_factor: float = Field(default=2.5)  # Never below 1.3
    interval_days: int = Field(default=0)
    repetitions: int = Field(default=0)
    lapses: int = Field(default=0)
    due_at: date = Field(default_factory=date.today, index=True)  # Calendar date, user-local
    last_q: int = Field(default=0)
    version: int = Field(default=0)  # Bumped on every write, checked on review submission
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))

    # Relationships
    problem: "Problem" = Relationship(back_populates="card")
