"""
Shared helpers for endpoints.
"""
from datetime import date
from typing import Optional


def local_today(today: Optional[date] = None) -> date:
    """The caller's local date if given, otherwise the server's."""
    return today if today is not None else date.today()
