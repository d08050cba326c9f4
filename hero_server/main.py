from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from hero_server.api.routes import (
    router,
    level_locked_error_handler,
    score_validation_error_handler,
    store_error_handler,
)
from hero_server.config import Config
from hero_server.database.store import Store
from hero_server.services import LeaderboardService, LevelUnlockService, ScoreValidator, SubmissionMode
from hero_server.utils.leaderboard_exceptions import (
    LevelLockedError, ScoreValidationError, StoreError, TransactionError
)
from hero_server.utils.logger import setup_logger
from hero_server.utils.scoring_strategies import HeroPointsStrategyFactory

logger = setup_logger(__name__)


def create_app(store: Optional[Store] = None) -> FastAPI:
    """Build the API app. A store may be injected (tests); otherwise Redis is opened on startup."""
    Config.validate()
    store = store or Store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Setting up Hero of the North backend...")
        await store.initialize()

        # Start the unlock clock on first deploy; later deploys keep the stored value
        await app.state.unlock_service.initialize_launch_time()
        logger.info(
            f"Backend ready: {Config.TOTAL_LEVELS} levels, formula={Config.HERO_POINTS_FORMULA}, "
            f"mode={Config.SUBMISSION_MODE}"
        )
        yield
        await store.close()
        logger.info("Store connection closed")

    app = FastAPI(
        title="Hero of the North API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if Config.DEBUG else None,
        redoc_url="/redoc" if Config.DEBUG else None,
        openapi_url="/openapi.json" if Config.DEBUG else None,
    )

    app.state.store = store
    app.state.unlock_service = LevelUnlockService(store)
    app.state.score_validator = ScoreValidator(
        strategy=HeroPointsStrategyFactory.create_strategy(Config.HERO_POINTS_FORMULA)
    )
    app.state.leaderboard_service = LeaderboardService(
        store, mode=SubmissionMode(Config.SUBMISSION_MODE)
    )

    app.add_exception_handler(ScoreValidationError, score_validation_error_handler)
    app.add_exception_handler(LevelLockedError, level_locked_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(TransactionError, store_error_handler)

    app.include_router(router, prefix=Config.API_PREFIX)
    return app


def run():
    uvicorn.run(create_app(), host=Config.HOST, port=Config.PORT)


if __name__ == '__main__':
    run()
