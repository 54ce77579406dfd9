"""
Due-queue selection.

The pure selectors work on any sequence of cards; the store-backed helpers load
a user's cards and apply them. Queues are recomputed on every call.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from leetcoach.models.models import Card

logger = logging.getLogger(__name__)

DEFAULT_WEEK_DAYS = 7


def queue_order_key(card):
    """Sort key: due date, then creation order, then id."""
    return (card.due_at, card.created_at or datetime.min, card.id or 0)


def select_due(cards: Iterable[Card], reference_date: date) -> List[Card]:
    """
    Select the cards due on or before reference_date.

    Args:
        cards: Cards to select from
        reference_date: Date the queue is computed for

    Returns:
        Due cards ordered by due date, ties broken by creation order
    """
    due = [card for card in cards if card.due_at <= reference_date]
    return sorted(due, key=queue_order_key)


def select_in_range(
    cards: Iterable[Card],
    start: date,
    end: date,
    today: date,
) -> List[Card]:
    """
    Select the cards due between start and end (inclusive).

    When the range starts today, overdue cards are kept and show up at the
    front of the result, so a weekly view never hides pending work.

    Args:
        cards: Cards to select from
        start: First day of the range
        end: Last day of the range
        today: Caller's local date

    Returns:
        Cards in the range, in queue order
    """
    include_overdue = start == today
    selected = [
        card for card in cards
        if card.due_at <= end and (include_overdue or card.due_at >= start)
    ]
    return sorted(selected, key=queue_order_key)


def _load_user_cards(session: Session, user_id: int, up_to: date) -> List[Card]:
    statement = (
        select(Card)
        .where(Card.user_id == user_id, Card.due_at <= up_to)
        .options(selectinload(Card.problem))  # type: ignore
    )
    return list(session.exec(statement).all())


def get_review_queue(session: Session, user_id: int, reference_date: date) -> List[Card]:
    """Load the user's due cards (with problems) in queue order."""
    cards = select_due(_load_user_cards(session, user_id, reference_date), reference_date)
    logger.debug(f"Review queue for user {user_id} on {reference_date}: {len(cards)} card(s)")
    return cards


def get_review_week(
    session: Session,
    user_id: int,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Card]:
    """
    Load the user's cards for a calendar range.

    start defaults to today and end to start + 6 days.
    """
    if start is None:
        start = today
    if end is None:
        end = start + timedelta(days=DEFAULT_WEEK_DAYS - 1)
    return select_in_range(_load_user_cards(session, user_id, end), start, end, today)
