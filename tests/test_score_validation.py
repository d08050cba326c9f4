import pytest

from hero_server.data_models.leaderboard import LevelCompletion
from hero_server.services.score_validation import ScoreValidator
from hero_server.utils.scoring_strategies import (
    HeroPointsStrategyFactory, StandardHeroPoints, SteepRetryHeroPoints
)


def completion(level=5, allies=3, time_spent=20, retries=0):
    return LevelCompletion(level_number=level, allies_saved=allies, time_spent=time_spent, retry_count=retries)


def test_valid_completion_scores_standard_formula(validator):
    result = validator.validate(completion())
    assert result.is_valid
    assert result.errors == []
    assert result.hero_points == 580


def test_too_many_allies_mentions_max(validator):
    result = validator.validate(completion(allies=6))
    assert not result.is_valid
    assert result.hero_points == 0
    assert any("Max: 5" in error for error in result.errors)


def test_all_violations_are_collected(validator):
    result = validator.validate(completion(level=5, allies=-1, time_spent=-3, retries=-2))
    assert not result.is_valid
    assert len(result.errors) == 3
    assert "Invalid time: cannot be negative" in result.errors
    assert "Invalid retry count" in result.errors


@pytest.mark.parametrize("time_spent", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_time_is_rejected(validator, time_spent):
    result = validator.validate(completion(time_spent=time_spent))
    assert not result.is_valid
    assert result.hero_points == 0
    assert result.errors == ["Invalid time: must be a finite number"]


def test_level_number_out_of_range(validator):
    for level in (-1, 32):
        result = validator.validate(completion(level=level, allies=1, time_spent=60))
        assert not result.is_valid
        assert f"Invalid level number: {level}" in result.errors


def test_completion_too_fast(validator):
    result = validator.validate(completion(time_spent=19))
    assert not result.is_valid
    assert result.errors == ["Completion too fast: 19s (Min: 20s)"]


def test_completion_too_slow(validator):
    result = validator.validate(completion(time_spent=3601))
    assert not result.is_valid
    assert "Max: 3600s" in result.errors[0]


def test_unlisted_level_uses_default_bounds(validator):
    assert validator.get_bounds(20) == (50, 10)
    assert validator.validate(completion(level=20, allies=50, time_spent=10)).is_valid
    assert not validator.validate(completion(level=20, allies=51, time_spent=10)).is_valid


def test_tutorial_allows_no_allies(validator):
    assert validator.validate(completion(level=0, allies=0, time_spent=5)).is_valid
    assert not validator.validate(completion(level=0, allies=1, time_spent=5)).is_valid


def test_custom_bounds_override():
    validator = ScoreValidator(level_bounds={7: (1, 30)}, total_levels=32)
    assert not validator.validate(completion(level=7, allies=2, time_spent=40)).is_valid
    assert not validator.validate(completion(level=7, allies=1, time_spent=29)).is_valid


def test_standard_formula_rounds_half_up():
    assert StandardHeroPoints().calculate(completion(allies=0, time_spent=20.5)) == 280
    assert StandardHeroPoints().calculate(completion(allies=1, time_spent=299.5)) == 101


def test_standard_formula_retry_penalty_and_floor():
    assert StandardHeroPoints().calculate(completion(allies=2, time_spent=100, retries=4)) == 380
    assert StandardHeroPoints().calculate(completion(allies=0, time_spent=400, retries=3)) == 0


def test_steep_retry_formula():
    strategy = SteepRetryHeroPoints()
    # Inside the 30s grace period the full bonus applies
    assert strategy.calculate(completion(allies=3, time_spent=25, retries=1)) == 300 + 300 - 50
    assert strategy.calculate(completion(allies=1, time_spent=80, retries=0)) == 100 + 200
    assert strategy.calculate(completion(allies=0, time_spent=500, retries=2)) == 0


def test_validator_uses_injected_strategy():
    validator = ScoreValidator(strategy=SteepRetryHeroPoints(), total_levels=32)
    result = validator.validate(completion(allies=3, time_spent=20, retries=1))
    assert result.hero_points == 550


def test_strategy_factory():
    assert isinstance(HeroPointsStrategyFactory.create_strategy("standard"), StandardHeroPoints)
    assert isinstance(HeroPointsStrategyFactory.create_strategy("STEEP_RETRY"), SteepRetryHeroPoints)
    with pytest.raises(ValueError):
        HeroPointsStrategyFactory.create_strategy("average")
