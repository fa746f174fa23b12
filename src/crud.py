from dataclasses import dataclass, field
from typing import List
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from src.models.dc_models import Level, LeaderboardEntryModel
from src.models.schemas import LeaderboardTable


@dataclass
class LeaderboardSnapshot:
    entries: List[LeaderboardEntryModel] = field(default_factory=list)
    version: int = 0  # 0 means the level has no row yet


class LeaderboardStore:
    """Leaderboard rows with a version number for compare-and-swap writes."""

    def __init__(self, Session: async_sessionmaker):
        self.Session = Session

    async def read(self, level: Level) -> LeaderboardSnapshot:
        """Read the top list of a level and the version it was read at

        Args:
            level (Level): Difficulty level

        Returns:
            LeaderboardSnapshot: entries best first, version 0 if the level is empty
        """
        async with self.Session() as session:
            stmt = select(LeaderboardTable).where(LeaderboardTable.level == level.value)
            result = await session.execute(stmt)
            row = result.scalars().first()
            if row is None:
                return LeaderboardSnapshot()
            entries = [LeaderboardEntryModel.model_validate(entry) for entry in row.entries]
            return LeaderboardSnapshot(entries=entries, version=row.version)

    async def compare_and_swap(
        self, level: Level, expected_version: int, entries: List[LeaderboardEntryModel]
    ) -> bool:
        """Write `entries` only if the row is still at `expected_version`

        Args:
            level (Level): Difficulty level
            expected_version (int): Version returned by the read this write is based on
            entries (List[LeaderboardEntryModel]): New top list

        Returns:
            bool: False if another writer got there first
        """
        payload = [entry.model_dump() for entry in entries]
        try:
            async with self.Session() as session:
                async with session.begin():
                    if expected_version == 0:
                        session.add(
                            LeaderboardTable(level=level.value, entries=payload, version=1)
                        )
                        return True
                    stmt = (
                        update(LeaderboardTable)
                        .where(
                            LeaderboardTable.level == level.value,
                            LeaderboardTable.version == expected_version,
                        )
                        .values(entries=payload, version=expected_version + 1)
                    )
                    result = await session.execute(stmt)
                    return result.rowcount == 1
        except IntegrityError:
            logging.info(f"Leaderboard {level.value} was created concurrently")
            return False
