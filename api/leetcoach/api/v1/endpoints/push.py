"""
Push subscription endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from leetcoach.core.config import settings
from leetcoach.core.database import get_session
from leetcoach.core.exceptions import NotFoundError
from leetcoach.schemas.push import PushPublicKeyResponse, PushSubscribeRequest, PushSubscribeResponse
from leetcoach.services.push_service import register_subscription

router = APIRouter(prefix="/push", tags=["push"])


@router.post("/subscribe", response_model=PushSubscribeResponse)
async def subscribe(
    request: PushSubscribeRequest,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Register a browser push subscription. Registering the same endpoint twice is fine."""
    created = register_subscription(
        session,
        user_id=user_id,
        endpoint=request.endpoint,
        p256dh=request.keys.p256dh,
        auth=request.keys.auth,
    )
    return PushSubscribeResponse(created=created)


@router.get("/public-key", response_model=PushPublicKeyResponse)
async def get_public_key():
    """VAPID public key the browser passes as applicationServerKey when subscribing."""
    if not settings.vapid_public_key:
        raise NotFoundError("Web push is not configured")
    return PushPublicKeyResponse(public_key=settings.vapid_public_key)
