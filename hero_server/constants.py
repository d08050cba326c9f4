"""
Server-wide constants for the Hero of the North game backend.

This module contains the magic numbers and store key layout used throughout
the codebase to improve maintainability and clarity.
"""

class TimeConstants:
    """Constants related to the unlock clock."""

    MS_PER_SECOND = 1000
    MS_PER_DAY = 24 * 60 * 60 * 1000

class LevelConstants:
    """Constants related to level validation bounds."""

    # Per-level bounds: level number -> (max allies, min completion time in seconds)
    LEVEL_BOUNDS = {
        0: (0, 5),    # Tutorial
        1: (3, 10),
        2: (3, 10),
        3: (4, 15),
        4: (4, 15),
        5: (5, 20),
    }

    # Fallback bounds for levels missing from the table
    DEFAULT_MAX_ALLIES = 50
    DEFAULT_MIN_TIME = 10  # Relaxed min time

    # 1 hour max per level
    MAX_REASONABLE_TIME = 3600

class ScoringConstants:
    """Constants for the hero points formulas."""

    POINTS_PER_ALLY = 100
    TIME_BONUS_CAP = 300  # Seconds of headroom rewarded by the time bonus
    RETRY_PENALTY = 5

    # Second server copy's curve: bonus starts dropping after a 30s grace period
    STEEP_TIME_GRACE = 30
    STEEP_TIME_SLOPE = 2
    STEEP_RETRY_PENALTY = 50

class StoreKeys:
    """Redis key layout owned by the backend."""

    LAUNCH_TIME = 'game:launchTime'
    LEADERBOARD = 'leaderboard:global'
    PLAYER_STATS_PREFIX = 'player:stats:'
    PLAYER_LEVEL_PREFIX = 'player:level:'

    @staticmethod
    def player_stats(user_id: str) -> str:
        return f"{StoreKeys.PLAYER_STATS_PREFIX}{user_id}"

    @staticmethod
    def player_level(user_id: str, level_number: int) -> str:
        return f"{StoreKeys.PLAYER_LEVEL_PREFIX}{user_id}:{level_number}"

    @staticmethod
    def completed_levels(user_id: str) -> str:
        return f"player:{user_id}:completed_levels"

class LeaderboardConstants:
    """Constants for leaderboard lookups."""

    UNRANKED = 0  # Rank sentinel for players absent from the index
    UNKNOWN_USERNAME = 'Unknown'

    # Backoff base for optimistic transaction retries (seconds)
    RETRY_BACKOFF_BASE = 0.01
