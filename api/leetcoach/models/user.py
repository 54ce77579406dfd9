"""
User model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from typing import Optional
from datetime import datetime

from leetcoach.utils.time_utils import utc_now


class User(SQLModel, table=True):
    """User table - owned by the auth provider, read-only for the core."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: Optional[str] = Field(default=None, index=True)
    email_verified: bool = Field(default=False)
    full_name: Optional[str] = Field(default=None)  # Used for the digest greeting
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))

    @property
    def contact_email(self) -> Optional[str]:
        """Email address notifications may be sent to, if any."""
        if self.email and self.email_verified:
            return self.email
        return None
