"""
Models package - imports all models so they register with SQLModel.
"""
from leetcoach.models.enums import Difficulty, CardState, ReviewMode, ReviewResult
from leetcoach.models.user import User
from leetcoach.models.problem import Problem
from leetcoach.models.card import Card
from leetcoach.models.review import Review
from leetcoach.models.push_subscription import PushSubscription

__all__ = [
    'Difficulty',
    'CardState',
    'ReviewMode',
    'ReviewResult',
    'User',
    'Problem',
    'Card',
    'Review',
    'PushSubscription',
]
