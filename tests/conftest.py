import os

import fakeredis
import pytest
import pytest_asyncio

# Keep the test run hermetic regardless of a developer's .env
os.environ.setdefault('DEBUG', 'true')

from hero_server.database.store import Store
from hero_server.services import LeaderboardService, LevelUnlockService, ScoreValidator, SubmissionMode


@pytest.fixture()
def redis_client():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest_asyncio.fixture()
async def store(redis_client):
    store = Store(client=redis_client, timeout=2.0)
    yield store
    await store.close()


@pytest.fixture()
def unlock_service(store):
    return LevelUnlockService(store, total_levels=32, initially_unlocked=2)


@pytest.fixture()
def leaderboard(store):
    return LeaderboardService(store, mode=SubmissionMode.BEST_SCORE, max_retries=10)


@pytest.fixture()
def first_completion_leaderboard(store):
    return LeaderboardService(store, mode=SubmissionMode.FIRST_COMPLETION, max_retries=10)


@pytest.fixture()
def validator():
    return ScoreValidator(total_levels=32)
