"""
Score and leaderboard data models.

Provides immutable data transfer objects for submissions, stored player
records and ranking queries. Stored records convert to and from the flat
string hashes kept in Redis.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class LevelCompletion:
    """Client claim for a completed level."""
    level_number: int
    allies_saved: int
    time_spent: float  # seconds
    retry_count: int


@dataclass(frozen=True)
class ScoreValidationResult:
    is_valid: bool
    hero_points: int
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LevelScore:
    """Best (or first) recorded completion of one level by one player."""
    level_number: int
    hero_points: int
    allies_saved: int
    time_spent: float
    retry_count: int
    completed_at: int

    def to_hash(self) -> Dict[str, str]:
        return {
            'levelNumber': str(self.level_number),
            'heroPoints': str(self.hero_points),
            'alliesSaved': str(self.allies_saved),
            'timeSpent': str(self.time_spent),
            'retryCount': str(self.retry_count),
            'completedAt': str(self.completed_at),
        }

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> Optional['LevelScore']:
        if not data or not data.get('heroPoints'):
            return None
        return cls(
            level_number=int(data.get('levelNumber', 0)),
            hero_points=int(data['heroPoints']),
            allies_saved=int(data.get('alliesSaved', 0)),
            time_spent=float(data.get('timeSpent', 0)),
            retry_count=int(data.get('retryCount', 0)),
            completed_at=int(data.get('completedAt', 0)),
        )


@dataclass(frozen=True)
class PlayerStats:
    """Cumulative per-player record."""
    user_id: str
    username: str
    avatar_url: str
    total_points: int
    levels_completed: int
    last_played: int

    @classmethod
    def from_hash(cls, user_id: str, data: Dict[str, str]) -> Optional['PlayerStats']:
        if not data or not data.get('totalPoints'):
            return None
        return cls(
            user_id=data.get('userId', user_id),
            username=data.get('username', ''),
            avatar_url=data.get('avatarUrl', ''),
            total_points=int(data['totalPoints']),
            levels_completed=int(data.get('levelsCompleted', 0)),
            last_played=int(data.get('lastPlayed', 0)),
        )


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of applying a validated score."""
    total_points: int
    rank: int
    hero_points: int
    is_new_level: bool = False
    is_improved_score: bool = False

    @property
    def changed(self) -> bool:
        return self.is_new_level or self.is_improved_score


@dataclass(frozen=True)
class LeaderboardEntry:
    """Single leaderboard row."""
    rank: int
    user_id: str
    username: str
    avatar_url: str
    total_points: int

    def to_dict(self) -> dict:
        return {
            'rank': self.rank,
            'username': self.username,
            'userId': self.user_id,
            'avatarUrl': self.avatar_url,
            'totalPoints': self.total_points,
        }


@dataclass(frozen=True)
class PlayerStanding:
    rank: int
    total_points: int
    levels_completed: int

    def to_dict(self) -> dict:
        return {
            'rank': self.rank,
            'totalPoints': self.total_points,
            'levelsCompleted': self.levels_completed,
        }
