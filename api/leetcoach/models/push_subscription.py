"""
PushSubscription model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, UniqueConstraint
from typing import Optional
from datetime import datetime

from leetcoach.utils.time_utils import utc_now


class PushSubscription(SQLModel, table=True):
    """PushSubscription table - web push endpoints registered by a user."""
    __tablename__ = "push_subscriptions"
    __table_args__ = (UniqueConstraint("user_id", "endpoint", name="uq_push_subscriptions_user_endpoint"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    endpoint: str
    p256dh: str
    auth: str
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))

    def subscription_info(self) -> dict:
        """Subscription in the shape expected by web push libraries."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }
