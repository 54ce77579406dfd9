"""
Per-user digest aggregation.

Computes the counts, preview list and weekly pass statistics for one user's
daily digest. The sub-aggregations are independent reads; they run
concurrently, each with its own session, and are combined once all of them
have finished. A failing sub-aggregation is logged and contributes its empty
value instead of failing the whole summary.
"""
import concurrent.futures
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from leetcoach.core.config import settings
from leetcoach.models.enums import ReviewResult
from leetcoach.models.models import Card, Problem, Review
from leetcoach.services.srs_service import round_half_up

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

WEEKLY_WINDOW_DAYS = 7
LOOKAHEAD_DAYS = 3
FALLBACK_TITLE = "Problem"
FALLBACK_DIFFICULTY = "Medium"

# Sub-aggregations per user, each holding its own connection while it runs
SUBQUERY_COUNT = 6


@dataclass
class ProblemPreview:
    """One upcoming problem shown in the digest."""
    problem_id: int
    title: str
    difficulty: str
    url: str
    due_at: date


@dataclass
class NextCounts:
    """Cards due one, two and three days after the reference date."""
    d1: int = 0
    d2: int = 0
    d3: int = 0

    @property
    def total(self) -> int:
        return self.d1 + self.d2 + self.d3


@dataclass
class WeeklyStats:
    """Reviews finished in the trailing week and how many of them passed."""
    total: int
    pass_count: int

    @property
    def pass_rate(self) -> int:
        """Pass rate as a whole percentage."""
        return round_half_up(self.pass_count / self.total * 100)


@dataclass
class DigestSummary:
    """Everything the daily digest needs to know about one user."""
    user_id: int
    reference_date: date
    due_count: int = 0
    overdue_count: int = 0
    due_today_count: int = 0
    next_counts: NextCounts = field(default_factory=NextCounts)
    previews: List[ProblemPreview] = field(default_factory=list)
    weekly_stats: Optional[WeeklyStats] = None
    failed_fields: List[str] = field(default_factory=list)  # Sub-aggregations that fell back to their empty value


def _count_cards(session: Session, user_id: int, *conditions) -> int:
    statement = select(func.count()).select_from(Card).where(Card.user_id == user_id, *conditions)
    return session.exec(statement).one()


def count_due(session: Session, user_id: int, reference_date: date) -> int:
    return _count_cards(session, user_id, Card.due_at <= reference_date)


def count_overdue(session: Session, user_id: int, reference_date: date) -> int:
    return _count_cards(session, user_id, Card.due_at < reference_date)


def count_due_today(session: Session, user_id: int, reference_date: date) -> int:
    return _count_cards(session, user_id, Card.due_at == reference_date)


def count_next_days(session: Session, user_id: int, reference_date: date) -> NextCounts:
    """Count cards due on each of the next three days."""
    days = [reference_date + timedelta(days=offset) for offset in range(1, LOOKAHEAD_DAYS + 1)]
    rows = session.exec(
        select(Card.due_at, func.count())
        .where(Card.user_id == user_id, Card.due_at.in_(days))  # type: ignore
        .group_by(Card.due_at)
    ).all()
    by_day = {due_at: count for due_at, count in rows}
    return NextCounts(d1=by_day.get(days[0], 0), d2=by_day.get(days[1], 0), d3=by_day.get(days[2], 0))


def load_previews(
    session: Session,
    user_id: int,
    reference_date: date,
    limit: int,
    fallback_url: str,
) -> List[ProblemPreview]:
    """
    Load the soonest-due cards with their problem details.

    Ordered like the review queue. A card whose problem cannot be resolved
    gets placeholder details.
    """
    rows = session.exec(
        select(Card, Problem)
        .join(Problem, Problem.id == Card.problem_id, isouter=True)  # type: ignore
        .where(Card.user_id == user_id, Card.due_at <= reference_date)
        .order_by(Card.due_at, Card.created_at, Card.id)  # type: ignore
        .limit(limit)
    ).all()

    previews = []
    for card, problem in rows:
        previews.append(ProblemPreview(
            problem_id=card.problem_id,
            title=problem.title if problem else FALLBACK_TITLE,
            difficulty=problem.difficulty if problem else FALLBACK_DIFFICULTY,
            url=problem.url if problem else fallback_url,
            due_at=card.due_at,
        ))
    return previews


def weekly_window(reference_date: date):
    """Inclusive finished_at bounds of the trailing week."""
    start = datetime.combine(reference_date - timedelta(days=WEEKLY_WINDOW_DAYS), time.min)
    end = datetime.combine(reference_date, time.max)
    return start, end


def load_weekly_stats(session: Session, user_id: int, reference_date: date) -> Optional[WeeklyStats]:
    """Trailing-week review totals, or None when there were no reviews."""
    start, end = weekly_window(reference_date)
    results = session.exec(
        select(Review.result).where(
            Review.user_id == user_id,
            Review.finished_at >= start,
            Review.finished_at <= end,
        )
    ).all()
    if not results:
        return None
    return WeeklyStats(
        total=len(results),
        pass_count=sum(1 for result in results if result == ReviewResult.PASS.value),
    )


def _run_in_session(session_factory: SessionFactory, query: Callable, *args):
    with session_factory() as session:
        return query(session, *args)


def aggregate_user(
    session_factory: SessionFactory,
    user_id: int,
    reference_date: date,
    preview_limit: Optional[int] = None,
    fallback_url: Optional[str] = None,
) -> DigestSummary:
    """
    Build the digest summary of one user.

    Args:
        session_factory: Callable returning a new database session
        user_id: User to summarize
        reference_date: Date the digest is for
        preview_limit: Maximum number of previews (defaults to settings.digest_preview_limit)
        fallback_url: URL for previews whose problem is missing (defaults to settings.app_url)

    Returns:
        DigestSummary; fields whose query failed keep their empty value and are
        listed in failed_fields
    """
    if preview_limit is None:
        preview_limit = settings.digest_preview_limit
    if fallback_url is None:
        fallback_url = settings.app_url

    queries: Dict[str, tuple] = {
        'due_count': (count_due, user_id, reference_date),
        'overdue_count': (count_overdue, user_id, reference_date),
        'due_today_count': (count_due_today, user_id, reference_date),
        'next_counts': (count_next_days, user_id, reference_date),
        'previews': (load_previews, user_id, reference_date, preview_limit, fallback_url),
        'weekly_stats': (load_weekly_stats, user_id, reference_date),
    }

    summary = DigestSummary(user_id=user_id, reference_date=reference_date)

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(queries)) as executor:
        future_to_field = {
            executor.submit(_run_in_session, session_factory, *query): field_name
            for field_name, query in queries.items()
        }

        # Join barrier: nothing is combined before every query has finished
        concurrent.futures.wait(future_to_field)

    for future, field_name in future_to_field.items():
        try:
            setattr(summary, field_name, future.result())
        except Exception as e:
            logger.error(
                f"Digest aggregation '{field_name}' failed for user {user_id}: {str(e)}",
                exc_info=e,
            )
            summary.failed_fields.append(field_name)

    return summary
