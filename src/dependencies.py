from typing import Optional

from fastapi import Depends, Header, Request

from src.authentication.token_authentication import TokenAuthentication
from src.services.daily_challenge import DailyChallengeService
from src.services.leaderboard import LeaderboardEngine


def get_token_auth(request: Request) -> TokenAuthentication:
    return request.app.state.token_auth


def get_leaderboard_engine(request: Request) -> LeaderboardEngine:
    return request.app.state.leaderboard_engine


def get_daily_challenge_service(request: Request) -> DailyChallengeService:
    return request.app.state.daily_challenge_service


async def get_current_username(
    authorization: Optional[str] = Header(default=None),
    token_auth: TokenAuthentication = Depends(get_token_auth),
) -> str:
    """Verified identity of the caller, for protected routes."""
    return token_auth.verify_authorization_header(authorization)
