"""
Push subscription schemas.
"""
from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    """Browser-generated keys of a push subscription."""
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscribeRequest(BaseModel):
    """Push subscription as produced by PushManager.subscribe()."""
    endpoint: str = Field(..., min_length=1, description="Push service endpoint URL")
    keys: PushKeys

    class Config:
        json_schema_extra = {
            "example": {
                "endpoint": "https://fcm.googleapis.com/fcm/send/abc123",
                "keys": {"p256dh": "BNc...", "auth": "tBH..."}
            }
        }


class PushSubscribeResponse(BaseModel):
    """Response from registering a subscription."""
    ok: bool = True
    created: bool


class PushPublicKeyResponse(BaseModel):
    """VAPID application server key for PushManager.subscribe()."""
    public_key: str
