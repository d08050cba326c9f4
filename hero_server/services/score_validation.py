"""
Server-side level completion validation.

Rejects implausible client claims and computes the authoritative hero points.
Pure: no store access, so it always runs before any leaderboard mutation.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from hero_server.config import Config
from hero_server.constants import LevelConstants
from hero_server.data_models.leaderboard import LevelCompletion, ScoreValidationResult
from hero_server.utils.scoring_strategies import HeroPointsStrategy, StandardHeroPoints

logger = logging.getLogger(__name__)


class ScoreValidator:
    """Validates level completions against per-level bounds."""

    def __init__(
        self,
        strategy: Optional[HeroPointsStrategy] = None,
        level_bounds: Optional[Dict[int, Tuple[int, int]]] = None,
        total_levels: int = None
    ):
        """
        Args:
            strategy: Hero points formula (defaults to StandardHeroPoints)
            level_bounds: level number -> (max allies, min time) overrides
            total_levels: Number of levels; valid level numbers are [0, total_levels - 1]
        """
        self.strategy = strategy or StandardHeroPoints()
        self.level_bounds = level_bounds if level_bounds is not None else LevelConstants.LEVEL_BOUNDS
        self.total_levels = total_levels if total_levels is not None else Config.TOTAL_LEVELS

    def get_bounds(self, level_number: int) -> Tuple[int, int]:
        """(max allies, min time) for a level, falling back to the defaults."""
        return self.level_bounds.get(
            level_number,
            (LevelConstants.DEFAULT_MAX_ALLIES, LevelConstants.DEFAULT_MIN_TIME)
        )

    def collect_errors(self, completion: LevelCompletion) -> List[str]:
        errors = []

        if completion.level_number < 0 or completion.level_number > self.total_levels - 1:
            errors.append(f"Invalid level number: {completion.level_number}")

        max_allies, min_time = self.get_bounds(completion.level_number)

        if completion.allies_saved < 0 or completion.allies_saved > max_allies:
            errors.append(f"Invalid allies count: {completion.allies_saved} (Max: {max_allies})")

        if not math.isfinite(completion.time_spent):
            errors.append("Invalid time: must be a finite number")
        elif completion.time_spent < 0:
            errors.append("Invalid time: cannot be negative")
        elif completion.time_spent < min_time:
            errors.append(f"Completion too fast: {completion.time_spent}s (Min: {min_time}s)")
        elif completion.time_spent > LevelConstants.MAX_REASONABLE_TIME:
            errors.append(
                f"Completion too slow: {completion.time_spent}s (Max: {LevelConstants.MAX_REASONABLE_TIME}s)"
            )

        if completion.retry_count < 0:
            errors.append("Invalid retry count")

        return errors

    def validate(self, completion: LevelCompletion) -> ScoreValidationResult:
        """Validate a completion and calculate its hero points.

        Every violated rule is reported, not only the first one. Invalid
        completions score 0 points.
        """
        errors = self.collect_errors(completion)
        if errors:
            logger.info(f"Rejected completion of level {completion.level_number}: {errors}")
            return ScoreValidationResult(is_valid=False, hero_points=0, errors=errors)

        return ScoreValidationResult(
            is_valid=True,
            hero_points=self.strategy.calculate(completion),
            errors=[],
        )
