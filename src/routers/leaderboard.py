import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.dependencies import get_current_username, get_leaderboard_engine
from src.domain.daily_seed import parse_level
from src.exceptions import ValidationError
from src.models.dc_models import (
    LeaderboardEntryModel,
    LeaderboardUpdateModel,
    RemoveScoreModel,
    SubmitScoreModel,
)
from src.services.leaderboard import LeaderboardEngine

leaderboard_router = APIRouter()


class LeaderboardAPI:
    @staticmethod
    @leaderboard_router.post(
        "/submit-score",
        response_model=LeaderboardUpdateModel,
        status_code=status.HTTP_201_CREATED,
    )
    async def submit_score(
        submission: SubmitScoreModel,
        username: str = Depends(get_current_username),
        engine: LeaderboardEngine = Depends(get_leaderboard_engine),
    ):
        if submission.score is None or not submission.level:
            raise ValidationError("Score and level must be provided")
        level = parse_level(submission.level)
        leaderboard = await engine.submit(level, username, submission.score)
        logging.info(f"{username} submitted {submission.score} on {level.value}")
        return LeaderboardUpdateModel(
            message="Score submitted successfully", leaderboard=leaderboard
        )

    @staticmethod
    @leaderboard_router.get("/leaderboard", response_model=List[LeaderboardEntryModel])
    async def get_leaderboard(
        level: Optional[str] = Query(default=None),
        engine: LeaderboardEngine = Depends(get_leaderboard_engine),
    ):
        if not level:
            raise ValidationError("Level must be provided")
        return await engine.get(parse_level(level))

    @staticmethod
    @leaderboard_router.post("/remove-score", response_model=LeaderboardUpdateModel)
    async def remove_score(
        removal: RemoveScoreModel,
        username: str = Depends(get_current_username),
        engine: LeaderboardEngine = Depends(get_leaderboard_engine),
    ):
        if not removal.username or not removal.level:
            raise ValidationError("Username and level must be provided")
        level = parse_level(removal.level)
        leaderboard = await engine.remove(level, removal.username)
        logging.info(f"{username} removed {removal.username} from {level.value}")
        return LeaderboardUpdateModel(
            message="Score removed successfully", leaderboard=leaderboard
        )
