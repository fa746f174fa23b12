import argparse
import asyncio
import secrets
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Optional, TypeVar

import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker

from src.authentication.authentication_crud import (
    CreateAuthentication,
    ReadAuthentication,
    hash_password,
)
from src.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    StorageUnavailableError,
)
from src.models.authentication_models import UserModel

ALGORITHM = "HS256"
T = TypeVar("T")

create_auth = CreateAuthentication()
read_auth = ReadAuthentication()


class TokenAuthentication:
    """Signup, login and bearer token verification."""

    def __init__(
        self,
        Session: async_sessionmaker,
        secret_key: str,
        pepper_data: str = "",
        expire_minutes: int = 60,
        timeout: float = 5.0,
    ):
        self.Session = Session
        self.secret_key = secret_key
        self.pepper_data = pepper_data
        self.expire_minutes = expire_minutes
        self.timeout = timeout

    async def _call(self, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise StorageUnavailableError("User storage timed out") from None

    async def store_user_data(self, username: str, password: str) -> UserModel:
        return await self._call(self._create_user(username, password))

    async def _create_user(self, username: str, password: str) -> UserModel:
        async with self.Session() as session:
            return await create_auth.create_user_data(
                username, password, self.pepper_data, session
            )

    async def _read_user(self, username: str) -> Optional[UserModel]:
        async with self.Session() as session:
            return await read_auth.read_user_data(username, session)

    async def check_user_data(self, username: str, password: str) -> UserModel:
        """Check the username and password against the stored hash

        Raises:
            InvalidCredentialsError: Unknown user or wrong password. Both give the same message.
            StorageUnavailableError: The user lookup did not finish within `timeout`

        Returns:
            UserModel: The authenticated user
        """
        user_data = await self._call(self._read_user(username))
        if user_data is None:
            raise InvalidCredentialsError("Invalid credentials")

        hashed_password = hash_password(password, user_data.salt, self.pepper_data)
        if not secrets.compare_digest(hashed_password, user_data.hash_password):
            raise InvalidCredentialsError("Invalid credentials")
        return user_data

    async def login(self, username: str, password: str) -> str:
        user_data = await self.check_user_data(username, password)
        return self.issue_token(user_data.username)

    def issue_token(self, username: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "username": username,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> str:
        """Return the username carried by a valid, unexpired token

        Raises:
            InvalidTokenError: Bad signature, expired, or no username claim
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError:
            raise InvalidTokenError("Invalid or expired token") from None

        username = payload.get("username")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError("Invalid or expired token")
        return username

    def verify_authorization_header(self, authorization: Optional[str]) -> str:
        """Resolve an `Authorization: Bearer <token>` header to a username

        Raises:
            MissingTokenError: No header at all
            InvalidTokenError: Not a bearer header, or the token does not verify
        """
        if not authorization:
            raise MissingTokenError("No token provided")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise InvalidTokenError("Invalid or expired token")
        return self.verify_token(token.strip())


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a Qurandle user")
    parser.add_argument("--username", type=str, help="Username", required=True)
    parser.add_argument("--password", type=str, help="Password", required=True)
    return parser


async def main(username: str, password: str):
    from src.db import create_engine, create_session_factory, create_tables
    from src.load_secrets import load_settings

    settings = load_settings()
    engine = create_engine(settings)
    await create_tables(engine)
    token_auth = TokenAuthentication(
        create_session_factory(engine), settings.jwt_secret_key, settings.pepper_data
    )
    user_data = await token_auth.store_user_data(username, password)
    print(user_data.username, user_data.hash_password, user_data.salt)
    await engine.dispose()


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    asyncio.run(main(args.username, args.password))
