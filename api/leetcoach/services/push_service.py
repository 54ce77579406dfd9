"""
Push subscription registration.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from leetcoach.models.models import PushSubscription

logger = logging.getLogger(__name__)


def register_subscription(
    session: Session,
    user_id: int,
    endpoint: str,
    p256dh: str,
    auth: str,
) -> bool:
    """
    Store a push subscription for a user.

    Registering an endpoint the user already has is a no-op.

    Returns:
        True if a new subscription was stored, False if it already existed
    """
    existing = session.exec(
        select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.endpoint == endpoint,
        )
    ).first()
    if existing:
        logger.info(f"Push subscription already registered for user {user_id}")
        return False

    session.add(PushSubscription(user_id=user_id, endpoint=endpoint, p256dh=p256dh, auth=auth))
    try:
        session.commit()
    except IntegrityError:
        # Registered concurrently by another request
        session.rollback()
        logger.info(f"Push subscription for user {user_id} was registered concurrently")
        return False

    logger.info(f"Registered push subscription for user {user_id}")
    return True
