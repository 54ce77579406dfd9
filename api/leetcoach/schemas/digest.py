"""
Daily digest schemas.
"""
from pydantic import BaseModel
from datetime import date


class DailyDigestResponse(BaseModel):
    """Response from the daily digest trigger."""
    ok: bool = True
    reference_date: date
    users: int
