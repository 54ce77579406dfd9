"""
Problem model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, JSON, UniqueConstraint
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from leetcoach.utils.time_utils import utc_now

if TYPE_CHECKING:
    from leetcoach.models.card import Card


class Problem(SQLModel, table=True):
    """Problem table - a practice item tracked by a user."""
    __tablename__ = "problems"
    __table_args__ = (UniqueConstraint("user_id", "slug", name="uq_problems_user_slug"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    source: str = Field(default="LeetCode")
    slug: str
    url: str
    title: str
    difficulty: str  # 'Easy', 'Medium' or 'Hard'
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))

    # Relationships
    card: Optional["Card"] = Relationship(
        back_populates="problem",
        sa_relationship_kwargs={"uselist": False},
    )
