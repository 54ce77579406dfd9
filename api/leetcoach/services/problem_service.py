"""
Problem service for business logic related to problems and their cards.
"""
import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from sqlmodel import Session, select

from leetcoach.core.exceptions import NotFoundError
from leetcoach.core.locks import card_locks
from leetcoach.models.enums import CardState
from leetcoach.models.models import Card, Problem, Review

logger = logging.getLogger(__name__)

LEETCODE_SLUG_RE = re.compile(r"leetcode\.com/problems/([a-z0-9-]+)", re.IGNORECASE)


def problem_slug(url: str, title: str) -> str:
    """
    Derive the per-user unique slug of a problem.

    Uses the slug from a leetcode.com/problems/<slug> URL, otherwise the
    lower-cased title with whitespace replaced by dashes.
    """
    match = LEETCODE_SLUG_RE.search(url)
    if match:
        return match.group(1)
    return re.sub(r"\s+", "-", title.lower())


def new_card(user_id: int, problem_id: int, today: date) -> Card:
    """Card in its initial state, due today."""
    return Card(
        user_id=user_id,
        problem_id=problem_id,
        state=CardState.LEARNING.value,
        ease_factor=2.5,
        interval_days=0,
        repetitions=0,
        lapses=0,
        due_at=today,
        last_q=0,
    )


def create_problem(
    session: Session,
    user_id: int,
    url: str,
    title: str,
    difficulty: str,
    tags: List[str],
    today: date,
) -> Tuple[Problem, Card]:
    """
    Create a problem, or update the existing one with the same slug, and make
    sure it has a card.

    An existing card is left untouched so re-adding a problem never resets
    its schedule.

    Returns:
        (problem, card)
    """
    slug = problem_slug(url, title)
    problem = session.exec(
        select(Problem).where(Problem.user_id == user_id, Problem.slug == slug)
    ).first()

    if problem is None:
        problem = Problem(user_id=user_id, slug=slug, url=url, title=title, difficulty=difficulty, tags=list(tags))
        session.add(problem)
        session.flush()  # Flush to get the problem ID
        logger.info(f"Created problem {problem.id} ('{slug}') for user {user_id}")
    else:
        problem.url = url
        problem.title = title
        problem.difficulty = difficulty
        problem.tags = list(tags)
        session.add(problem)
        logger.info(f"Updated existing problem {problem.id} ('{slug}') for user {user_id}")

    card = session.exec(
        select(Card).where(Card.user_id == user_id, Card.problem_id == problem.id)
    ).first()
    if card is None:
        card = new_card(user_id, problem.id, today)
        session.add(card)

    session.commit()
    session.refresh(problem)
    session.refresh(card)
    return problem, card


def list_problems(session: Session, user_id: int) -> List[Tuple[Problem, Optional[Card]]]:
    """List the user's problems with their cards, newest first."""
    problems = session.exec(
        select(Problem)
        .where(Problem.user_id == user_id)
        .order_by(Problem.created_at.desc(), Problem.id.desc())  # type: ignore
    ).all()
    return [(problem, problem.card) for problem in problems]


def delete_problem(session: Session, user_id: int, problem_id: int) -> None:
    """
    Delete a problem together with its card and reviews.

    Raises:
        NotFoundError: If the problem does not exist or belongs to another user
    """
    problem = session.exec(
        select(Problem).where(Problem.id == problem_id, Problem.user_id == user_id)
    ).first()
    if not problem:
        raise NotFoundError(f"Problem with id {problem_id} not found")

    reviews = session.exec(
        select(Review).where(Review.problem_id == problem_id, Review.user_id == user_id)
    ).all()
    for review in reviews:
        session.delete(review)

    card = session.exec(
        select(Card).where(Card.problem_id == problem_id, Card.user_id == user_id)
    ).first()
    card_id = card.id if card else None
    if card:
        session.delete(card)
    # Reviews and card go before the problem they reference
    session.flush()

    session.delete(problem)
    session.commit()

    logger.info(
        f"Deleted problem {problem_id} for user {user_id} "
        f"({len(reviews)} reviews, card {card_id})"
    )


def reschedule_card(session: Session, user_id: int, card_id: int, due_at: date) -> Card:
    """
    Manually move a card's due date.

    Raises:
        NotFoundError: If the card does not exist or belongs to another user
    """
    with card_locks.lock_for(card_id):
        card = session.exec(
            select(Card).where(Card.id == card_id, Card.user_id == user_id)
        ).first()
        if not card:
            raise NotFoundError(f"Card with id {card_id} not found")

        card.due_at = due_at
        card.version += 1
        session.add(card)
        session.commit()
        session.refresh(card)

    logger.info(f"Rescheduled card {card_id} for user {user_id} to {due_at}")
    return card
