"""
Hero Points Strategy Pattern

Each strategy turns a validated level completion into the server-authoritative
hero points for that level. The retry penalty only ever applies to the single
completion being scored; it never reaches into a player's lifetime total.

Two curves exist:
- StandardHeroPoints: canonical formula used by default
- SteepRetryHeroPoints: grace period on time and a 50-point retry penalty

Selection is explicit through configuration; the curves are never blended.
"""

from abc import ABC, abstractmethod
from typing import List
import logging
import math

from hero_server.constants import ScoringConstants
from hero_server.data_models.leaderboard import LevelCompletion

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


class HeroPointsStrategy(ABC):
    """Abstract base class for hero point formulas."""

    @abstractmethod
    def calculate(self, completion: LevelCompletion) -> int:
        """
        Calculate hero points for a single level completion.

        Args:
            completion: Already validated level completion

        Returns:
            Integer hero points
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get human-readable name of this strategy"""
        pass


class StandardHeroPoints(HeroPointsStrategy):
    """
    Canonical formula: (allies x 100) + max(0, 300 - timeSpent) - (retries x 5)

    Floored at zero so a slow run with many retries never lowers a total.
    """

    def calculate(self, completion: LevelCompletion) -> int:
        allies_points = completion.allies_saved * ScoringConstants.POINTS_PER_ALLY
        time_points = max(0, ScoringConstants.TIME_BONUS_CAP - completion.time_spent)
        retry_penalty = completion.retry_count * ScoringConstants.RETRY_PENALTY

        return max(0, round_half_up(allies_points + time_points - retry_penalty))

    def get_strategy_name(self) -> str:
        return "Standard"


class SteepRetryHeroPoints(HeroPointsStrategy):
    """
    Time bonus of 300 during a 30s grace period, then dropping 2 points per
    second (zero from 180s). Each retry costs 50 points; total floored at 0.
    """

    def calculate(self, completion: LevelCompletion) -> int:
        allies_points = completion.allies_saved * ScoringConstants.POINTS_PER_ALLY
        time_bonus = ScoringConstants.TIME_BONUS_CAP - (
            completion.time_spent - ScoringConstants.STEEP_TIME_GRACE
        ) * ScoringConstants.STEEP_TIME_SLOPE
        time_bonus = max(0, min(ScoringConstants.TIME_BONUS_CAP, time_bonus))
        retry_penalty = completion.retry_count * ScoringConstants.STEEP_RETRY_PENALTY

        return math.floor(max(0, allies_points + time_bonus - retry_penalty))

    def get_strategy_name(self) -> str:
        return "Steep Retry"


class HeroPointsStrategyFactory:
    """Factory for creating hero point strategies from configuration"""

    _STRATEGIES = {
        'standard': StandardHeroPoints,
        'steep_retry': SteepRetryHeroPoints,
    }

    @staticmethod
    def create_strategy(formula: str) -> HeroPointsStrategy:
        """
        Create the configured hero points strategy.

        Args:
            formula: Formula name ("standard" or "steep_retry")

        Returns:
            HeroPointsStrategy instance
        """
        strategy_class = HeroPointsStrategyFactory._STRATEGIES.get(formula.lower())
        if strategy_class is None:
            raise ValueError(f"Unknown hero points formula: {formula}")
        logger.debug(f"Using hero points formula: {formula}")
        return strategy_class()

    @staticmethod
    def get_available_strategies() -> List[str]:
        return list(HeroPointsStrategyFactory._STRATEGIES.keys())
