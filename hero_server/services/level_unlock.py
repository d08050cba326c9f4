"""
Daily level unlock service.

The unlock clock is global for all players: the tutorial and level 1 are open
from launch, then one more level opens every 24 hours. Nothing ticks in the
background; status is derived on demand from the stored launch timestamp.
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from hero_server.config import Config
from hero_server.constants import StoreKeys, TimeConstants
from hero_server.data_models.levels import LevelUnlockInfo, UnlockStatus
from hero_server.services.base import BaseService

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    return int(time.time() * TimeConstants.MS_PER_SECOND)


def _format_ms(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / TimeConstants.MS_PER_SECOND, tz=timezone.utc).isoformat()


def compute_unlock_status(
    launch_time: int,
    now: int,
    total_levels: int,
    initially_unlocked: int,
    ms_per_day: int = TimeConstants.MS_PER_DAY
) -> UnlockStatus:
    """Derive unlock progress from the launch time.

    A launch time in the future (clock skew) counts as day 0.
    """
    days_elapsed = max(0, (now - launch_time) // ms_per_day)
    unlocked_levels = min(initially_unlocked + days_elapsed, total_levels)

    next_unlock_time = None
    if unlocked_levels < total_levels:
        next_unlock_time = launch_time + (days_elapsed + 1) * ms_per_day

    return UnlockStatus(
        unlocked_levels=unlocked_levels,
        next_unlock_time=next_unlock_time,
        total_levels=total_levels,
        days_elapsed=days_elapsed,
    )


def level_unlock_time(
    launch_time: int,
    level_number: int,
    initially_unlocked: int,
    ms_per_day: int = TimeConstants.MS_PER_DAY
) -> int:
    """Timestamp at which ``level_number`` opens. Inclusive boundary."""
    days_until_unlock = level_number - initially_unlocked + 1
    return launch_time + days_until_unlock * ms_per_day


class LevelUnlockService(BaseService):
    """Computes which levels are open from a single immutable launch time."""

    def __init__(self, store, total_levels: int = None, initially_unlocked: int = None):
        super().__init__(store)
        self.total_levels = total_levels if total_levels is not None else Config.TOTAL_LEVELS
        self.initially_unlocked = (
            initially_unlocked if initially_unlocked is not None else Config.INITIALLY_UNLOCKED_LEVELS
        )
        self.ms_per_day = TimeConstants.MS_PER_DAY

    async def get_launch_time(self) -> Optional[int]:
        value = await self.store.get(StoreKeys.LAUNCH_TIME)
        if not value:
            return None
        return int(value)

    async def initialize_launch_time(self, now: int = None) -> int:
        """
        Persist the launch time if it is not set yet and return the stored value.

        Uses SET NX so concurrent first calls converge on a single timestamp;
        an existing value is never overwritten.
        """
        now = current_time_ms() if now is None else now

        created = await self.store.set_if_absent(StoreKeys.LAUNCH_TIME, str(now))
        if created:
            logger.info(f"Game launch time initialized: {_format_ms(now)}")
            return now

        launch_time = await self.get_launch_time()
        if launch_time is None:
            # Key vanished between SET NX and GET; claim it again
            return await self.initialize_launch_time(now)

        logger.debug(f"Launch time already set: {_format_ms(launch_time)}")
        return launch_time

    async def get_unlock_status(self, now: int = None) -> UnlockStatus:
        now = current_time_ms() if now is None else now

        launch_time = await self.get_launch_time()
        if launch_time is None:
            launch_time = await self.initialize_launch_time(now)
            if launch_time == now:
                return UnlockStatus(
                    unlocked_levels=min(self.initially_unlocked, self.total_levels),
                    next_unlock_time=now + self.ms_per_day,
                    total_levels=self.total_levels,
                    days_elapsed=0,
                )

        return compute_unlock_status(
            launch_time, now, self.total_levels, self.initially_unlocked, self.ms_per_day
        )

    async def get_all_levels_unlock_info(self, now: int = None) -> List[LevelUnlockInfo]:
        now = current_time_ms() if now is None else now

        status = await self.get_unlock_status(now)
        launch_time = await self.get_launch_time()
        if launch_time is None:
            launch_time = now

        levels = []
        for level_number in range(self.total_levels):
            if level_number < status.unlocked_levels:
                levels.append(LevelUnlockInfo(level_number=level_number, is_unlocked=True))
                continue

            unlock_time = level_unlock_time(
                launch_time, level_number, self.initially_unlocked, self.ms_per_day
            )
            levels.append(LevelUnlockInfo(
                level_number=level_number,
                is_unlocked=False,
                unlock_time=unlock_time,
                time_until_unlock=max(0, unlock_time - now),
            ))

        return levels

    async def is_level_unlocked(self, level_number: int, now: int = None) -> bool:
        if level_number < 0 or level_number >= self.total_levels:
            return False

        status = await self.get_unlock_status(now)
        return level_number < status.unlocked_levels
