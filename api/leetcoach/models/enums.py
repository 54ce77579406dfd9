"""
Model enums.
"""
from enum import Enum


class Difficulty(str, Enum):
    """Problem difficulty."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class CardState(str, Enum):
    """Scheduling state of a card."""
    LEARNING = "learning"
    REVIEW = "review"


class ReviewMode(str, Enum):
    """Whether a review was the first attempt on a card or a repeat."""
    LEARN = "learn"
    REVIEW = "review"


class ReviewResult(str, Enum):
    """Self-reported outcome of a review."""
    PASS = "pass"
    FAIL = "fail"
    PARTIAL = "partial"
