"""
Services package for the Hero of the North game backend.

Unlock schedule, score validation and leaderboard services over a shared store.
"""

from .base import BaseService
from .leaderboard import LeaderboardService, SubmissionMode
from .level_unlock import LevelUnlockService
from .score_validation import ScoreValidator

__all__ = ['BaseService', 'LeaderboardService', 'SubmissionMode', 'LevelUnlockService', 'ScoreValidator']
