"""
Level unlock data models.

Immutable data transfer objects derived from the launch time; none of these
are stored.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UnlockStatus:
    """Global unlock progress at a point in time."""
    unlocked_levels: int
    next_unlock_time: Optional[int]  # ms timestamp, None once everything is unlocked
    total_levels: int
    days_elapsed: int

    def to_dict(self) -> dict:
        return {
            'unlockedLevels': self.unlocked_levels,
            'nextUnlockTime': self.next_unlock_time,
            'totalLevels': self.total_levels,
            'daysElapsed': self.days_elapsed,
        }


@dataclass(frozen=True)
class LevelUnlockInfo:
    """Unlock state of a single level."""
    level_number: int
    is_unlocked: bool
    unlock_time: Optional[int] = None
    time_until_unlock: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'levelNumber': self.level_number,
            'isUnlocked': self.is_unlocked,
            'unlockTime': self.unlock_time,
            'timeUntilUnlock': self.time_until_unlock,
        }
