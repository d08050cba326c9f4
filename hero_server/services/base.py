"""
Base service class for the game backend.

Provides store access and retry logic for optimistic transactions shared by
the service layer.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from redis.exceptions import WatchError

from hero_server.constants import LeaderboardConstants
from hero_server.database.store import Store
from hero_server.utils.leaderboard_exceptions import TransactionError

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services with an injected store."""

    def __init__(self, store: Store):
        """
        Initialize base service with a store.

        Args:
            store: Shared key-value store handle
        """
        self.store = store

    async def execute_with_retry(
        self,
        func: Callable[[], Awaitable[Any]],
        operation: str,
        max_retries: int = 3
    ) -> Any:
        """Re-run ``func`` when a watched key changed under it.

        Only transaction conflicts are retried; store failures propagate on
        the first occurrence.
        """
        for attempt in range(max_retries):
            try:
                return await func()
            except WatchError:
                if attempt == max_retries - 1:
                    break
                logger.warning(f"Retry attempt {attempt + 1} for {operation}: watched key changed")
                await asyncio.sleep(LeaderboardConstants.RETRY_BACKOFF_BASE * (2 ** attempt))  # Exponential backoff
        raise TransactionError(operation, max_retries)
