from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, Integer, String


class Base(DeclarativeBase):
    pass


class UserTable(Base):
    __tablename__ = "users"
    username = Column(String, primary_key=True, index=True)
    hash_password = Column(String, nullable=False)
    salt = Column(String, nullable=False)


class LeaderboardTable(Base):
    """One row per level. entries is the ordered top list as [{"username", "score"}]."""

    __tablename__ = "leaderboard"
    level = Column(String, primary_key=True)
    entries = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)  # bumped on every write
