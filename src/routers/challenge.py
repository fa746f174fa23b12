from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.dependencies import get_daily_challenge_service
from src.domain.daily_seed import parse_level
from src.models.dc_models import DailyChallengeModel
from src.services.daily_challenge import DailyChallengeService

challenge_router = APIRouter()


class DailyChallengeAPI:
    @staticmethod
    @challenge_router.get("/daily-challenge", response_model=DailyChallengeModel)
    async def get_daily_challenge(
        level: Optional[str] = Query(default=None),
        service: DailyChallengeService = Depends(get_daily_challenge_service),
    ):
        # The level is checked before any corpus request is made.
        parsed_level = parse_level(level)
        return await service.get_daily_challenge(parsed_level)
