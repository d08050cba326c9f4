"""
Custom exceptions for the score and leaderboard system with client-facing messages.
"""

from typing import List


class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ScoreValidationError(LeaderboardException):
    """Raised when a level completion claim fails validation."""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"Invalid level completion: {'; '.join(self.errors)}",
            "Invalid level completion data"
        )

class LevelLockedError(LeaderboardException):
    """Raised when a score is submitted for a level that has not unlocked yet."""
    def __init__(self, level_number: int):
        self.level_number = level_number
        super().__init__(
            f"Level {level_number} is currently locked",
            "Level is currently locked"
        )

class StoreError(LeaderboardException):
    """Raised when key-value store operations fail. Safe to retry."""
    def __init__(self, operation: str, details: str = None):
        self.operation = operation
        super().__init__(
            f"Store error during {operation}: {details}",
            "Storage is temporarily unavailable. Please try again later."
        )

class TransactionError(LeaderboardException):
    """Raised when an optimistic transaction keeps conflicting."""
    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"Transaction failed for {operation} after {attempts} attempts",
            "Failed to save score. Please try again."
        )
