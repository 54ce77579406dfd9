"""
Custom exceptions for the application.
"""


class LeetCoachException(Exception):
    """Base exception for all LeetCoach application exceptions."""
    pass


class NotFoundError(LeetCoachException):
    """Raised when a requested resource is not found or not owned by the caller."""
    pass


class ConflictError(LeetCoachException):
    """Raised when a concurrent write was detected; the caller may retry."""
    pass


class AuthorizationError(LeetCoachException):
    """Raised when authorization fails."""
    pass
