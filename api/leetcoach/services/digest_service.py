"""
Daily digest: rendering and dispatch.

run_daily_digest finds every user with at least one due card, summarizes each
of them on a bounded worker pool and sends the digest by email and web push.
Users and channels are isolated from each other: a failure is logged and
recorded in the user's outcome, and the run carries on. Only failing to list
the candidate users aborts the run.
"""
import concurrent.futures
import html
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional

from sqlmodel import Session, select

from leetcoach.core.config import settings
from leetcoach.core.database import get_session_factory
from leetcoach.models.models import Card, PushSubscription, User
from leetcoach.services.aggregation_service import SUBQUERY_COUNT, DigestSummary, aggregate_user
from leetcoach.services.notification_service import EmailSender, PushSender

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

PUSH_TITLE = "LeetCoach: Review time"

DIFFICULTY_COLORS = {
    'Hard': '#C2410C',
    'Medium': '#2563EB',
    'Easy': '#16A34A',
}


@dataclass
class UserDigestOutcome:
    """What happened for one user during a digest run."""
    user_id: int
    due_count: int = 0
    skipped: bool = False
    email_sent: Optional[bool] = None  # None when no email was attempted
    push_sent: int = 0
    push_failed: int = 0
    failed_fields: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class DigestRunResult:
    """Result of one digest run."""
    reference_date: date
    users_processed: int
    outcomes: List[UserDigestOutcome] = field(default_factory=list)


def digest_subject(due_count: int) -> str:
    return f"LeetCoach: {due_count} problem{'s' if due_count != 1 else ''} due today"


def push_payload(due_count: int) -> dict:
    return {
        'title': PUSH_TITLE,
        'body': f"You have {due_count} due card{'s' if due_count > 1 else ''} today. Tap to open.",
    }


def max_digest_workers(requested: int) -> int:
    """
    Cap the number of users summarized at once so their sub-aggregations fit
    in the connection pool (pool size plus overflow).
    """
    connection_budget = settings.db_pool_size + settings.db_max_overflow
    return max(1, min(requested, connection_budget // SUBQUERY_COUNT))


def format_long_date(value: date) -> str:
    """E.g. 'Mon, Oct 19, 2026'."""
    return value.strftime("%a, %b %d, %Y")


def render_digest_email(
    summary: DigestSummary,
    app_url: str,
    user_name: Optional[str] = None,
) -> str:
    """
    Render the HTML body of the digest email.

    Contains the date label, a greeting, the due/overdue/upcoming counts, the
    preview list and, when there were reviews in the last week, the weekly
    pass rate.
    """
    cta_url = f"{app_url}?utm_source=email&utm_campaign=daily-digest"
    greeting = f"Good morning, {html.escape(user_name)}!" if user_name else "Good morning!"

    preview_rows = []
    for preview in summary.previews:
        color = DIFFICULTY_COLORS.get(preview.difficulty, DIFFICULTY_COLORS['Medium'])
        preview_rows.append(
            f'<tr><td style="padding:12px 0 0 0;">'
            f'<a href="{html.escape(preview.url, quote=True)}" style="text-decoration:none;color:#111827;font-weight:600;">'
            f'{html.escape(preview.title)}</a>'
            f'<div style="font-size:12px;color:#6B7280;margin-top:4px;">'
            f'<span style="display:inline-block;padding:2px 8px;border-radius:999px;background:{color};color:#fff;margin-right:8px;">'
            f'{html.escape(preview.difficulty)}</span>'
            f'<span>Due: {preview.due_at.isoformat()}</span></div></td></tr>'
        )

    previews_section = ""
    if preview_rows:
        previews_section = (
            '<tr><td style="padding:8px 24px 0 24px;font-size:13px;color:#6B7280;">Up next</td></tr>'
            '<tr><td style="padding:0 24px 8px 24px;">'
            f'<table role="presentation" style="width:100%;border-collapse:collapse;">{"".join(preview_rows)}</table>'
            '</td></tr>'
        )

    weekly_section = ""
    if summary.weekly_stats is not None:
        stats = summary.weekly_stats
        weekly_section = (
            '<tr><td style="padding:8px 24px 16px 24px;font-size:13px;color:#6B7280;">'
            f'Last 7 days: <strong>{stats.total}</strong> reviews, '
            f'<strong>{stats.pass_rate}%</strong> passed'
            '</td></tr>'
        )

    return (
        '<div style="background:#F3F4F6;padding:24px 0;">'
        '<table role="presentation" align="center" style="width:100%;max-width:600px;background:#ffffff;border-radius:12px;">'
        '<tr><td style="padding:20px 24px;border-bottom:1px solid #E5E7EB;">'
        '<span style="font-size:18px;font-weight:700;color:#111827;">LeetCoach</span>'
        f'<span style="float:right;font-size:12px;color:#6B7280;">{format_long_date(summary.reference_date)}</span>'
        '</td></tr>'
        '<tr><td style="padding:20px 24px;">'
        f'<div style="font-size:16px;color:#111827;">{greeting} '
        f'You have <strong>{summary.due_count}</strong> problem{"s" if summary.due_count != 1 else ""} to review today.</div>'
        '<div style="margin-top:12px;background:#F9FAFB;border:1px solid #E5E7EB;border-radius:8px;padding:12px;font-size:13px;color:#374151;">'
        f'Overdue: <strong>{summary.overdue_count}</strong> · '
        f'Due today: <strong>{summary.due_today_count}</strong> · '
        f'Next 3 days: <strong>{summary.next_counts.total}</strong>'
        '</div>'
        '<div style="margin-top:16px;">'
        f'<a href="{cta_url}" style="display:inline-block;background:#111827;color:#ffffff;text-decoration:none;padding:12px 18px;border-radius:10px;font-weight:600;">Start reviewing</a>'
        '</div>'
        '</td></tr>'
        f'{previews_section}'
        f'{weekly_section}'
        '<tr><td style="padding:16px 24px;border-top:1px solid #E5E7EB;background:#F9FAFB;font-size:12px;color:#6B7280;">'
        'You can turn these reminders off in your preferences. '
        f'<a href="{cta_url}" style="color:#2563EB;text-decoration:none;">Open LeetCoach</a>'
        '</td></tr>'
        '</table></div>'
    )


def find_candidate_users(session: Session, reference_date: date) -> List[int]:
    """Distinct owners of at least one card due on or before reference_date."""
    user_ids = session.exec(
        select(Card.user_id).where(Card.due_at <= reference_date).distinct()
    ).all()
    return sorted(user_ids)


class DigestDispatcher:
    """Runs the daily digest over all candidate users."""

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        email_sender: Optional[EmailSender] = None,
        push_sender: Optional[PushSender] = None,
        max_workers: Optional[int] = None,
        app_url: Optional[str] = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.email_sender = email_sender or EmailSender()
        self.push_sender = push_sender or PushSender()
        self.max_workers = max_digest_workers(max_workers or settings.digest_max_workers)
        self.app_url = app_url or settings.app_url

    def run(self, reference_date: date) -> DigestRunResult:
        with self.session_factory() as session:
            user_ids = find_candidate_users(session, reference_date)

        logger.info(f"Daily digest for {reference_date}: {len(user_ids)} candidate user(s)")

        outcomes: List[UserDigestOutcome] = []
        if user_ids:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self.process_user, user_id, reference_date)
                    for user_id in user_ids
                ]
                outcomes = [future.result() for future in futures]

        failed = sum(1 for outcome in outcomes if outcome.error)
        logger.info(
            f"Daily digest for {reference_date} finished: {len(user_ids)} processed, {failed} failed"
        )
        return DigestRunResult(
            reference_date=reference_date,
            users_processed=len(user_ids),
            outcomes=outcomes,
        )

    def process_user(self, user_id: int, reference_date: date) -> UserDigestOutcome:
        """Summarize one user and notify them on every channel. Never raises."""
        outcome = UserDigestOutcome(user_id=user_id)
        try:
            summary = aggregate_user(
                self.session_factory,
                user_id,
                reference_date,
                fallback_url=self.app_url,
            )
            outcome.due_count = summary.due_count
            outcome.failed_fields = list(summary.failed_fields)

            if "due_count" in summary.failed_fields:
                # A failed count must not look like "nothing due"
                outcome.error = f"aggregation failed: {', '.join(summary.failed_fields)}"
                logger.error(f"Digest for user {user_id}: due count unavailable, not notified")
                return outcome
            if summary.failed_fields:
                logger.warning(
                    f"Digest for user {user_id}: sending with defaults for {', '.join(summary.failed_fields)}"
                )

            if summary.due_count == 0:
                outcome.skipped = True
                logger.info(f"Digest for user {user_id}: nothing due, skipping")
                return outcome

            self._send_email(summary, outcome)
            self._send_pushes(summary, outcome)
        except Exception as e:
            logger.error(f"Digest for user {user_id} failed: {str(e)}", exc_info=e)
            outcome.error = str(e)

        return outcome

    def _send_email(self, summary: DigestSummary, outcome: UserDigestOutcome) -> None:
        try:
            with self.session_factory() as session:
                user = session.get(User, summary.user_id)
                email = user.contact_email if user else None
                user_name = user.full_name if user else None

            if not email:
                logger.info(f"Digest for user {summary.user_id}: no verified email, skipping email")
                return

            body = render_digest_email(summary, self.app_url, user_name)
            outcome.email_sent = self.email_sender.send(email, digest_subject(summary.due_count), body)
        except Exception as e:
            logger.error(f"Digest email for user {summary.user_id} failed: {str(e)}", exc_info=e)
            outcome.email_sent = False

    def _send_pushes(self, summary: DigestSummary, outcome: UserDigestOutcome) -> None:
        with self.session_factory() as session:
            subscriptions = session.exec(
                select(PushSubscription)
                .where(PushSubscription.user_id == summary.user_id)
                .order_by(PushSubscription.id)  # type: ignore
            ).all()
            subscription_infos = [subscription.subscription_info() for subscription in subscriptions]

        payload = push_payload(summary.due_count)
        for subscription_info in subscription_infos:
            try:
                sent = self.push_sender.send(subscription_info, payload)
            except Exception as e:
                logger.error(
                    f"Push for user {summary.user_id} to {subscription_info['endpoint'][:40]}... failed: {str(e)}",
                    exc_info=e,
                )
                sent = False

            if sent:
                outcome.push_sent += 1
            else:
                outcome.push_failed += 1


def run_daily_digest(reference_date: date, **kwargs) -> DigestRunResult:
    """
    Run the daily digest for reference_date.

    Keyword arguments are passed to DigestDispatcher (session factory,
    senders, worker count, app URL).
    """
    return DigestDispatcher(**kwargs).run(reference_date)
