"""
Leaderboard service backed by Redis sorted sets.

Applies validated level scores to durable player state and the global ranked
index, and answers ranking queries. Each submission is one optimistic
transaction: the player's keys are WATCHed while the new totals are computed,
and the level score, player stats and ranked index are written in a single
MULTI/EXEC. A concurrent submission for the same player aborts the EXEC and
the whole read-compute-write step runs again.

Two submission modes are supported:
- best_score: a later, strictly better run replaces the level score and the
  total is adjusted by the difference (incremental)
- first_completion: the first completion of a level is permanent and the
  total is recomputed from every stored level score

Equal totals are ordered the way Redis orders equal scores; ties are not part
of the ranking contract.
"""

import json
import logging
import time
from enum import Enum
from typing import List, Optional

from redis.asyncio.client import Pipeline

from hero_server.config import Config
from hero_server.constants import LeaderboardConstants, StoreKeys, TimeConstants
from hero_server.data_models.leaderboard import (
    LeaderboardEntry, LevelScore, PlayerStanding, PlayerStats, SubmissionResult
)
from hero_server.services.base import BaseService
from hero_server.utils.leaderboard_exceptions import StoreError

logger = logging.getLogger(__name__)


class SubmissionMode(Enum):
    BEST_SCORE = 'best_score'
    FIRST_COMPLETION = 'first_completion'


class LeaderboardService(BaseService):
    """Service for score submission and ranking queries."""

    def __init__(self, store, mode: SubmissionMode = None, max_retries: int = None):
        super().__init__(store)
        self.mode = mode or SubmissionMode(Config.SUBMISSION_MODE)
        self.max_retries = max_retries if max_retries is not None else Config.SUBMIT_MAX_RETRIES

    async def submit_score(
        self,
        user_id: str,
        username: str,
        avatar_url: str,
        level_number: int,
        hero_points: int,
        allies_saved: int,
        time_spent: float,
        retry_count: int,
        now: int = None
    ) -> SubmissionResult:
        """
        Record a validated level score and update the player's total and rank.

        Callers must validate the completion first; nothing here re-checks
        bounds.

        Returns:
            SubmissionResult with the total and rank after the call. When the
            submission changes nothing, the current total and rank are
            returned and hero_points is the already recorded value.
        """
        now = int(time.time() * TimeConstants.MS_PER_SECOND) if now is None else now
        level_score = LevelScore(
            level_number=level_number,
            hero_points=hero_points,
            allies_saved=allies_saved,
            time_spent=time_spent,
            retry_count=retry_count,
            completed_at=now,
        )

        if self.mode == SubmissionMode.FIRST_COMPLETION:
            body = self._first_completion_body(user_id, username, avatar_url, level_score, now)
            watch_keys = [
                StoreKeys.player_stats(user_id),
                StoreKeys.player_level(user_id, level_number),
                StoreKeys.completed_levels(user_id),
            ]
        else:
            body = self._best_score_body(user_id, username, avatar_url, level_score, now)
            watch_keys = [
                StoreKeys.player_stats(user_id),
                StoreKeys.player_level(user_id, level_number),
            ]

        operation = f"submit_score user={user_id} level={level_number}"
        outcome = await self.execute_with_retry(
            lambda: self.store.transaction(operation, watch_keys, body),
            operation,
            max_retries=self.max_retries
        )

        rank = await self.get_player_rank(user_id)
        result = SubmissionResult(rank=rank, **outcome)

        if result.changed:
            logger.info(
                f"Score recorded for {user_id} level {level_number}: {result.hero_points} pts "
                f"(new={result.is_new_level}, improved={result.is_improved_score}), "
                f"total {result.total_points}, rank {rank}"
            )
        else:
            logger.debug(f"Score for {user_id} level {level_number} not improved; totals unchanged")
        return result

    def _stats_mapping(self, user_id: str, username: str, avatar_url: str,
                       total_points: int, levels_completed: int, now: int) -> dict:
        mapping = {
            'userId': user_id,
            'username': username,
            'totalPoints': str(total_points),
            'levelsCompleted': str(levels_completed),
            'lastPlayed': str(now),
        }
        # Keep a previously stored avatar when the caller has none
        if avatar_url:
            mapping['avatarUrl'] = avatar_url
        return mapping

    def _best_score_body(self, user_id: str, username: str, avatar_url: str,
                         level_score: LevelScore, now: int):
        stats_key = StoreKeys.player_stats(user_id)
        level_key = StoreKeys.player_level(user_id, level_score.level_number)

        async def body(pipe: Pipeline) -> dict:
            stats = await pipe.hgetall(stats_key) or {}
            existing = LevelScore.from_hash(await pipe.hgetall(level_key))

            total_points = int(stats.get('totalPoints') or 0)
            levels_completed = int(stats.get('levelsCompleted') or 0)

            is_new_level = existing is None
            is_improved_score = not is_new_level and level_score.hero_points > existing.hero_points

            if is_new_level:
                levels_completed += 1
                total_points += level_score.hero_points
            elif is_improved_score:
                total_points = total_points - existing.hero_points + level_score.hero_points
            else:
                return {
                    'total_points': total_points,
                    'hero_points': existing.hero_points,
                }

            pipe.multi()
            pipe.hset(level_key, mapping=level_score.to_hash())
            pipe.hset(stats_key, mapping=self._stats_mapping(
                user_id, username, avatar_url, total_points, levels_completed, now
            ))
            pipe.zadd(StoreKeys.LEADERBOARD, {user_id: total_points})
            return {
                'total_points': total_points,
                'hero_points': level_score.hero_points,
                'is_new_level': is_new_level,
                'is_improved_score': is_improved_score,
            }

        return body

    def _first_completion_body(self, user_id: str, username: str, avatar_url: str,
                               level_score: LevelScore, now: int):
        stats_key = StoreKeys.player_stats(user_id)
        level_key = StoreKeys.player_level(user_id, level_score.level_number)
        completed_key = StoreKeys.completed_levels(user_id)

        async def body(pipe: Pipeline) -> dict:
            existing = LevelScore.from_hash(await pipe.hgetall(level_key))
            if existing is not None:
                stats = await pipe.hgetall(stats_key) or {}
                return {
                    'total_points': int(stats.get('totalPoints') or 0),
                    'hero_points': existing.hero_points,
                }

            completed_levels = json.loads(await pipe.get(completed_key) or '[]')
            if level_score.level_number not in completed_levels:
                completed_levels.append(level_score.level_number)

            # Level scores are never overwritten in this mode
            total_points = level_score.hero_points
            for completed_level in completed_levels:
                if completed_level == level_score.level_number:
                    continue
                stored = LevelScore.from_hash(
                    await pipe.hgetall(StoreKeys.player_level(user_id, completed_level))
                )
                if stored is not None:
                    total_points += stored.hero_points

            pipe.multi()
            pipe.hset(level_key, mapping=level_score.to_hash())
            pipe.set(completed_key, json.dumps(completed_levels))
            pipe.hset(stats_key, mapping=self._stats_mapping(
                user_id, username, avatar_url, total_points, len(completed_levels), now
            ))
            pipe.zadd(StoreKeys.LEADERBOARD, {user_id: total_points})
            return {
                'total_points': total_points,
                'hero_points': level_score.hero_points,
                'is_new_level': True,
            }

        return body

    async def get_top_players(self, limit: int = 50) -> List[LeaderboardEntry]:
        """
        Get the top ``limit`` players ordered by total points descending.

        A failing store yields an empty leaderboard rather than an error.
        """
        if limit <= 0:
            return []

        try:
            rows = await self.store.zrevrange_with_scores(StoreKeys.LEADERBOARD, 0, limit - 1)
            rows = [(user_id, score) for user_id, score in rows if user_id]
            all_stats = await self.store.hgetall_many(
                [StoreKeys.player_stats(user_id) for user_id, _ in rows]
            )

            entries = []
            for index, ((user_id, score), stats) in enumerate(zip(rows, all_stats), start=1):
                entries.append(LeaderboardEntry(
                    rank=index,
                    user_id=user_id,
                    username=stats.get('username') or LeaderboardConstants.UNKNOWN_USERNAME,
                    avatar_url=stats.get('avatarUrl') or '',
                    total_points=int(score),
                ))
            return entries
        except StoreError as e:
            logger.error(f"Error fetching leaderboard: {e}")
            return []

    async def get_player_rank(self, user_id: str) -> int:
        """1-based rank (1 = highest total); 0 when the player is unranked."""
        position = await self.store.zrevrank(StoreKeys.LEADERBOARD, user_id)
        if position is None:
            return LeaderboardConstants.UNRANKED
        return position + 1

    async def get_player_stats(self, user_id: str) -> Optional[PlayerStats]:
        data = await self.store.hgetall(StoreKeys.player_stats(user_id))
        return PlayerStats.from_hash(user_id, data)

    async def get_level_score(self, user_id: str, level_number: int) -> Optional[LevelScore]:
        data = await self.store.hgetall(StoreKeys.player_level(user_id, level_number))
        return LevelScore.from_hash(data)

    async def get_player_standing(self, user_id: str) -> Optional[PlayerStanding]:
        """Rank, total and completed level count, or None for unknown players."""
        stats = await self.get_player_stats(user_id)
        if stats is None:
            return None

        rank = await self.get_player_rank(user_id)
        return PlayerStanding(
            rank=rank,
            total_points=stats.total_points,
            levels_completed=stats.levels_completed,
        )
