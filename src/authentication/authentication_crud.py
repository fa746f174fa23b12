import hashlib
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ConflictError
from src.models.authentication_models import UserModel
from src.models.schemas import UserTable


def hash_password(password: str, salt: str, pepper_data: str) -> str:
    return hashlib.sha256((password + salt + pepper_data).encode()).hexdigest()


class CreateAuthentication:
    @staticmethod
    async def create_user_data(
        username: str, password: str, pepper_data: str, session: AsyncSession
    ) -> UserModel:
        """Create user data to authenticate the user

        Args:
            username (str): New, unique username
            password (str): Plain password, only its salted hash is stored
            pepper_data (str): Server side pepper

        Raises:
            ConflictError: The username is already taken
        """
        salt = secrets.token_hex(8)
        user = UserTable(
            username=username,
            hash_password=hash_password(password, salt, pepper_data),
            salt=salt,
        )
        async with session:
            existing = await session.get(UserTable, username)
            if existing is not None:
                raise ConflictError("Username already exists")
            try:
                session.add(user)
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logging.info(f"Concurrent signup for {username}")
                raise ConflictError("Username already exists") from None
        return UserModel(username=username, hash_password=user.hash_password, salt=salt)


class ReadAuthentication:
    @staticmethod
    async def read_user_data(username: str, session: AsyncSession) -> Optional[UserModel]:
        """Read user data to get salt and password hash

        Args:
            username (str): username of the user

        Returns:
            UserModel: username, password hash and salt, None if the user does not exist
        """
        async with session:
            stmt = select(UserTable).where(UserTable.username == username)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return UserModel.model_validate(result)
