"""
SRS (Spaced Repetition System) service implementing an SM-2 variant.

The scheduler is a pure state transition: it takes an immutable snapshot of a
card plus a graded review and returns a new snapshot and the next due date.
Persisting the result is the caller's job (see review_service).
"""
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable

from leetcoach.models.enums import CardState, Difficulty

# SM-2 constants
MIN_EASE_FACTOR = 1.3
FAILED_EASE_PENALTY = 0.2
PASSING_QUALITY = 3
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 3

# Interval shrink factors applied after the SM-2 step
HARD_INTERVAL_FACTOR = 0.8
GRAPH_INTERVAL_FACTOR = 0.9
GRAPH_TAG = "Graph"


@dataclass(frozen=True)
class CardSnapshot:
    """Scheduling fields of a card at one point in time."""
    ease_factor: float = 2.5
    interval_days: int = 0
    repetitions: int = 0
    lapses: int = 0
    state: str = CardState.LEARNING.value

    @classmethod
    def from_card(cls, card) -> "CardSnapshot":
        return cls(
            ease_factor=card.ease_factor,
            interval_days=card.interval_days,
            repetitions=card.repetitions,
            lapses=card.lapses,
            state=card.state,
        )


@dataclass(frozen=True)
class ScheduleResult:
    """Outcome of one review: the new card state and its next due date."""
    snapshot: CardSnapshot
    due_at: date


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """
    Apply the SM-2 ease factor update for a passing review.

    Args:
        ease_factor: Current ease factor
        quality: Quality score (3-5 for passing reviews)

    Returns:
        New ease factor, never below MIN_EASE_FACTOR
    """
    miss = 5 - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def adjust_interval(interval_days: int, difficulty: str, tags: Iterable[str]) -> int:
    """
    Shrink an interval for hard problems and graph problems.

    Both adjustments round up, so an interval of 1 stays 1.
    """
    if difficulty == Difficulty.HARD:
        interval_days = math.ceil(interval_days * HARD_INTERVAL_FACTOR)
    if GRAPH_TAG in set(tags or ()):
        interval_days = math.ceil(interval_days * GRAPH_INTERVAL_FACTOR)
    return int(interval_days)


def advance(
    snapshot: CardSnapshot,
    quality: int,
    difficulty: str,
    tags: Iterable[str],
    today: date,
) -> ScheduleResult:
    """
    Compute the next state of a card after a graded review.

    Failing reviews (quality < 3) reset repetitions, count a lapse and put the
    card back into learning with a one-day interval. Passing reviews grow the
    interval (1 day, 3 days, then interval * ease factor) and move the card to
    review. The interval is then shrunk for Hard difficulty and the "Graph" tag.

    Quality must already be validated to lie in 0-5.

    Args:
        snapshot: Card state before the review
        quality: Self-graded quality score (0-5)
        difficulty: Problem difficulty ('Easy', 'Medium' or 'Hard')
        tags: Problem tags
        today: Caller's local date; the due date is counted from here

    Returns:
        ScheduleResult with the new snapshot and due date
    """
    if quality < PASSING_QUALITY:
        new_snapshot = replace(
            snapshot,
            ease_factor=max(MIN_EASE_FACTOR, snapshot.ease_factor - FAILED_EASE_PENALTY),
            interval_days=FIRST_INTERVAL_DAYS,
            repetitions=0,
            lapses=snapshot.lapses + 1,
            state=CardState.LEARNING.value,
        )
    else:
        if snapshot.repetitions == 0:
            interval_days = FIRST_INTERVAL_DAYS
        elif snapshot.repetitions == 1:
            interval_days = SECOND_INTERVAL_DAYS
        else:
            interval_days = round_half_up(snapshot.interval_days * snapshot.ease_factor)

        new_snapshot = replace(
            snapshot,
            ease_factor=update_ease_factor(snapshot.ease_factor, quality),
            interval_days=interval_days,
            repetitions=snapshot.repetitions + 1,
            state=CardState.REVIEW.value,
        )

    interval_days = adjust_interval(new_snapshot.interval_days, difficulty, tags)
    new_snapshot = replace(new_snapshot, interval_days=interval_days)

    return ScheduleResult(
        snapshot=new_snapshot,
        due_at=today + timedelta(days=interval_days),
    )
