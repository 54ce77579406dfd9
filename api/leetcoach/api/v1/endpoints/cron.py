"""
Scheduled job endpoints, called by an external time-based trigger.
"""
from fastapi import APIRouter, Depends, Header
from typing import Optional
from datetime import date
import logging
import secrets

from leetcoach.core.config import settings
from leetcoach.core.database import get_session_factory
from leetcoach.core.exceptions import AuthorizationError
from leetcoach.schemas.digest import DailyDigestResponse
from leetcoach.services.digest_service import DigestDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


def get_digest_dispatcher(session_factory=Depends(get_session_factory)) -> DigestDispatcher:
    """Dependency building the digest dispatcher."""
    return DigestDispatcher(session_factory=session_factory)


def verify_cron_key(x_cron_key: Optional[str] = Header(None)) -> None:
    """Reject requests without the shared cron secret."""
    if not settings.cron_secret or not x_cron_key:
        raise AuthorizationError("Forbidden")
    if not secrets.compare_digest(x_cron_key.encode(), settings.cron_secret.encode()):
        raise AuthorizationError("Forbidden")


# Plain def: the digest blocks on I/O and runs in FastAPI's threadpool
@router.post("/daily", response_model=DailyDigestResponse, dependencies=[Depends(verify_cron_key)])
def daily_digest(dispatcher: DigestDispatcher = Depends(get_digest_dispatcher)):
    """Send today's digest to every user with due cards."""
    reference_date = date.today()
    result = dispatcher.run(reference_date)
    return DailyDigestResponse(reference_date=result.reference_date, users=result.users_processed)
