import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from hero_server.api.schemas import ScoreSubmission, describe_validation_error
from hero_server.config import Config
from hero_server.utils.leaderboard_exceptions import LevelLockedError, ScoreValidationError


router = APIRouter()
logger = logging.getLogger(__name__)


def _services(request: Request):
    state = request.app.state
    return state.unlock_service, state.score_validator, state.leaderboard_service


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/levels/unlock-status")
async def unlock_status(request: Request):
    unlock_service, _, _ = _services(request)
    status = await unlock_service.get_unlock_status()
    return status.to_dict()


@router.get("/levels/all-info")
async def all_levels_info(request: Request):
    unlock_service, _, _ = _services(request)
    levels = await unlock_service.get_all_levels_unlock_info()
    return {"levels": [level.to_dict() for level in levels]}


@router.get("/levels/{number}/unlocked")
async def level_unlocked(number: str, request: Request):
    try:
        level_number = int(number)
    except ValueError:
        raise HTTPException(status_code=400, detail="Level number must be an integer")

    unlock_service, _, _ = _services(request)
    return {"isUnlocked": await unlock_service.is_level_unlocked(level_number)}


@router.post("/score/submit")
async def submit_score(data: dict, request: Request):
    unlock_service, score_validator, leaderboard_service = _services(request)

    try:
        submission = ScoreSubmission(**data)
    except ValidationError as e:
        raise ScoreValidationError(describe_validation_error(e))

    # Recalculate hero points server-side; client totals are never trusted
    validation = score_validator.validate(submission.to_completion())
    if not validation.is_valid:
        raise ScoreValidationError(validation.errors)

    if not await unlock_service.is_level_unlocked(submission.levelNumber):
        raise LevelLockedError(submission.levelNumber)

    result = await leaderboard_service.submit_score(
        user_id=submission.userId,
        username=submission.username,
        avatar_url=submission.avatarUrl or '',
        level_number=submission.levelNumber,
        hero_points=validation.hero_points,
        allies_saved=submission.alliesSaved,
        time_spent=submission.timeSpent,
        retry_count=submission.retryCount,
    )

    return {
        "success": True,
        "heroPoints": validation.hero_points,
        "totalPoints": result.total_points,
        "rank": result.rank,
        "scoreUpdated": result.changed,
    }


@router.get("/leaderboard/top")
async def top_players(request: Request, limit: str = Query(None)):
    if limit is None:
        limit = Config.LEADERBOARD_DEFAULT_LIMIT
    else:
        try:
            limit = int(limit)
        except ValueError:
            raise HTTPException(status_code=400, detail="Limit must be an integer")
    limit = max(1, min(limit, Config.LEADERBOARD_MAX_LIMIT))

    _, _, leaderboard_service = _services(request)
    entries = await leaderboard_service.get_top_players(limit)
    return {"entries": [entry.to_dict() for entry in entries]}


@router.get("/leaderboard/standing/{user_id}")
async def player_standing(user_id: str, request: Request):
    _, _, leaderboard_service = _services(request)
    standing = await leaderboard_service.get_player_standing(user_id)
    if standing is None:
        return {"found": False}
    return {"found": True, "standing": standing.to_dict()}


async def score_validation_error_handler(request: Request, exc: ScoreValidationError):
    return JSONResponse(status_code=400, content={"success": False, "errors": exc.errors})


async def level_locked_error_handler(request: Request, exc: LevelLockedError):
    logger.info(f"Rejected submission for locked level {exc.level_number}")
    return JSONResponse(status_code=403, content={"success": False, "error": exc.user_message})


async def store_error_handler(request: Request, exc: Exception):
    logger.error(f"Store unavailable while handling {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"success": False, "error": exc.user_message})
