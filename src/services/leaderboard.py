import asyncio
import logging
from typing import Awaitable, Callable, List, TypeVar

from src.crud import LeaderboardStore
from src.domain.leaderboard_rules import LEADERBOARD_SIZE, merge_score, remove_entry
from src.exceptions import LeaderboardContentionError, StorageUnavailableError
from src.models.dc_models import Level, LeaderboardEntryModel

T = TypeVar("T")
Mutation = Callable[[List[LeaderboardEntryModel]], List[LeaderboardEntryModel]]


class LeaderboardEngine:
    """Per level top list. Every write is a compare-and-swap on the level's row."""

    def __init__(
        self,
        store: LeaderboardStore,
        size: int = LEADERBOARD_SIZE,
        max_attempts: int = 5,
        timeout: float = 5.0,
    ):
        self.store = store
        self.size = size
        self.max_attempts = max_attempts
        self.timeout = timeout

    async def _call(self, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise StorageUnavailableError("Leaderboard storage timed out") from None

    async def get(self, level: Level) -> List[LeaderboardEntryModel]:
        snapshot = await self._call(self.store.read(level))
        return snapshot.entries

    async def submit(self, level: Level, username: str, score: int) -> List[LeaderboardEntryModel]:
        """Merge a score into the level's board

        Args:
            level (Level): Difficulty level
            username (str): Verified identity of the submitter
            score (int): Non-negative score

        Returns:
            List[LeaderboardEntryModel]: The board as stored after the merge
        """
        return await self._update(
            level, lambda entries: merge_score(entries, username, score, self.size)
        )

    async def remove(self, level: Level, username: str) -> List[LeaderboardEntryModel]:
        return await self._update(level, lambda entries: remove_entry(entries, username))

    async def _update(self, level: Level, mutate: Mutation) -> List[LeaderboardEntryModel]:
        """Read, apply `mutate`, and write back unless someone else wrote in between.

        A lost race re-reads and re-applies the mutation on the fresh state.
        """
        for attempt in range(1, self.max_attempts + 1):
            snapshot = await self._call(self.store.read(level))
            entries = mutate(snapshot.entries)
            if entries == snapshot.entries:
                return entries
            if await self._call(self.store.compare_and_swap(level, snapshot.version, entries)):
                return entries
            logging.info(
                f"Leaderboard {level.value} changed during update, retrying ({attempt}/{self.max_attempts})"
            )
        raise LeaderboardContentionError(
            f"Leaderboard {level.value} is busy, please retry"
        )
