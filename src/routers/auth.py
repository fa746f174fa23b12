import logging

from fastapi import APIRouter, Depends, status

from src.authentication.token_authentication import TokenAuthentication
from src.dependencies import get_token_auth
from src.models.dc_models import LoginModel, MessageModel, SignupModel, TokenModel

auth_router = APIRouter()


class AuthAPI:
    @staticmethod
    @auth_router.post(
        "/signup", response_model=MessageModel, status_code=status.HTTP_201_CREATED
    )
    async def signup(
        user: SignupModel, token_auth: TokenAuthentication = Depends(get_token_auth)
    ):
        await token_auth.store_user_data(user.username, user.password)
        logging.info(f"Registered user {user.username}")
        return MessageModel(message="User registered successfully")

    @staticmethod
    @auth_router.post("/login", response_model=TokenModel)
    async def login(
        user: LoginModel, token_auth: TokenAuthentication = Depends(get_token_auth)
    ):
        token = await token_auth.login(user.username, user.password)
        return TokenModel(token=token, username=user.username)
