"""
Review service: records graded reviews and advances card schedules.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from leetcoach.core.exceptions import ConflictError, NotFoundError
from leetcoach.core.locks import card_locks
from leetcoach.models.enums import ReviewMode
from leetcoach.models.models import Card, Problem, Review
from leetcoach.services.srs_service import CardSnapshot, advance
from leetcoach.utils.time_utils import to_naive_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    """Persisted result of one review submission."""
    card: Card
    review: Review
    next_due: date


def submit_review(
    session: Session,
    user_id: int,
    card_id: int,
    result: str,
    q: int,
    duration_sec: int,
    error_types: List[str],
    notes: Optional[str],
    today: date,
    now: Optional[datetime] = None,
) -> ReviewOutcome:
    """
    Record a review and advance the card's schedule.

    The card is read, advanced and written back under its lock, and the write
    only applies if the card's version is still the one that was read. The
    review row and the card update are committed together.

    Args:
        session: Database session
        user_id: Owner of the card
        card_id: Card being reviewed
        result: 'pass', 'fail' or 'partial'
        q: Quality score, already validated to 0-5
        duration_sec: Time spent on the attempt
        error_types: Free-text error tags
        notes: Optional note (at most 200 characters)
        today: Caller's local date, the base of the next due date
        now: Finish time of the attempt (defaults to the current UTC time)

    Returns:
        ReviewOutcome with the updated card, the new review and the next due date

    Raises:
        NotFoundError: If the card or its problem is missing or not owned by the user
        ConflictError: If the card was modified concurrently
    """
    if now is None:
        now = utc_now()
    now = to_naive_utc(now)

    with card_locks.lock_for(card_id):
        card = session.exec(
            select(Card).where(Card.id == card_id, Card.user_id == user_id)
        ).first()
        if not card:
            raise NotFoundError(f"Card with id {card_id} not found")

        problem = session.exec(
            select(Problem).where(Problem.id == card.problem_id, Problem.user_id == user_id)
        ).first()
        if not problem:
            raise NotFoundError(f"Problem with id {card.problem_id} not found")

        read_version = card.version
        mode = ReviewMode.LEARN if card.repetitions == 0 else ReviewMode.REVIEW
        scheduled = advance(
            CardSnapshot.from_card(card),
            quality=q,
            difficulty=problem.difficulty,
            tags=problem.tags or [],
            today=today,
        )

        review = Review(
            user_id=user_id,
            problem_id=problem.id,
            card_id=card.id,
            mode=mode.value,
            started_at=now - timedelta(seconds=duration_sec),
            finished_at=now,
            duration_sec=duration_sec,
            result=result,
            q=q,
            error_types=list(error_types),
            notes=notes,
        )
        session.add(review)

        new_state = scheduled.snapshot
        outcome = session.exec(
            update(Card)
            .where(Card.id == card.id, Card.user_id == user_id, Card.version == read_version)
            .values(
                ease_factor=new_state.ease_factor,
                interval_days=new_state.interval_days,
                repetitions=new_state.repetitions,
                lapses=new_state.lapses,
                state=new_state.state,
                last_q=q,
                due_at=scheduled.due_at,
                version=read_version + 1,
            )
        )
        if outcome.rowcount != 1:
            session.rollback()
            logger.warning(f"Review for card {card_id} (user {user_id}) lost a concurrent update")
            raise ConflictError(f"Card {card_id} was modified concurrently, please retry")

        session.commit()
        session.refresh(card)
        session.refresh(review)

    logger.info(
        f"Review recorded for card {card_id} (user {user_id}): q={q}, result={result}, "
        f"interval={new_state.interval_days}d, next_due={scheduled.due_at}"
    )
    return ReviewOutcome(card=card, review=review, next_due=scheduled.due_at)


def list_reviews(
    session: Session,
    user_id: int,
    finished_from: Optional[datetime] = None,
    finished_to: Optional[datetime] = None,
) -> List[Review]:
    """List the user's reviews by finish time, newest first."""
    statement = select(Review).where(Review.user_id == user_id)
    if finished_from is not None:
        statement = statement.where(Review.finished_at >= to_naive_utc(finished_from))
    if finished_to is not None:
        statement = statement.where(Review.finished_at <= to_naive_utc(finished_to))
    statement = statement.order_by(Review.finished_at.desc(), Review.id.desc())  # type: ignore
    return list(session.exec(statement).all())
