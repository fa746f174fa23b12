import logging
from datetime import datetime, timezone
from typing import Optional

from src.domain.daily_seed import (
    challenge_date,
    extract_window,
    generate_daily_seed,
    select_locator,
)
from src.exceptions import QurandleError
from src.models.dc_models import (
    CorpusLocatorModel,
    DailyChallengeModel,
    Level,
    SurahModel,
)
from src.services.corpus_client import CorpusClient


class DailyChallengeService:
    def __init__(self, corpus: CorpusClient, timezone_name: str = "America/Toronto"):
        self.corpus = corpus
        self.timezone_name = timezone_name

    def today(self, now: Optional[datetime] = None) -> str:
        return challenge_date(now or datetime.now(timezone.utc), self.timezone_name)

    async def get_daily_challenge(self, level: Level, date: Optional[str] = None) -> DailyChallengeModel:
        """Build the challenge of the day for one level

        Args:
            level (Level): Difficulty level
            date (str, optional): YYYY-MM-DD. Defaults to today in the reference timezone.

        Raises:
            UpstreamDependencyError: Any corpus request failed, nothing partial is returned
            EmptyCorpusError: The corpus had nothing to choose from

        Returns:
            DailyChallengeModel: Same result for every call with the same date and level
        """
        date = date or self.today()
        seed = generate_daily_seed(date)

        if level in (Level.easy, Level.medium):
            chapters = await self.corpus.list_chapters()
            locator = select_locator(seed, level, chapters)
            chapter = next(c for c in chapters if c["number"] == locator.number)
            surah = SurahModel(
                id=chapter["number"],
                name=chapter.get("name"),
                englishName=chapter.get("englishName"),
            )
            verses = await self.corpus.fetch_verses(locator)
            window = extract_window(verses, seed, level)
        else:
            locator = select_locator(seed, level)
            verses = await self.corpus.fetch_verses(locator)
            window = extract_window(verses, seed, level)
            surah = SurahModel(id=verses[0]["surah"]["number"])

        logging.info(f"Daily challenge {date} {level.value}: {locator.kind} {locator.number}")
        return DailyChallengeModel(
            date=date,
            level=level,
            seed=seed,
            locator=CorpusLocatorModel(kind=locator.kind, number=locator.number),
            surah=surah,
            verses=window,
        )

    async def warm_daily_challenges(self) -> None:
        """Compute today's challenge for every level so the corpus cache is filled."""
        date = self.today()
        for level in Level:
            try:
                await self.get_daily_challenge(level, date)
            except QurandleError as e:
                logging.error(f"Failed to warm daily challenge {date} {level.value}: {e.message}")
