"""Daily challenge selection rules.

Everything here is a pure function of the date string, the seed and the corpus
data handed in, so every caller on the same day and level gets the same verses.

Rule of thumb:
- OK: hashing, range filtering, index arithmetic.
- Not OK: fetching from the corpus API, datetime.now().
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

from src.exceptions import EmptyCorpusError, ValidationError
from src.models.dc_models import Level

SEED_MODULUS = 233280
SEED_BASE = 31

WINDOW_LENGTH = 5
JUZ_COUNT = 30
PAGE_COUNT = 604

# Inclusive surah number bands for the two chapter based levels.
SURAH_RANGES = {
    Level.easy: (78, 114),
    Level.medium: (1, 77),
}


@dataclass(frozen=True)
class CorpusLocator:
    kind: str  # "surah", "juz" or "page"
    number: int


def parse_level(value: Optional[str]) -> Level:
    """Turn a raw query/body value into a Level, rejecting anything else."""
    try:
        return Level(value)
    except ValueError:
        raise ValidationError("Invalid or missing difficulty level.") from None


def challenge_date(now: datetime, timezone: str) -> str:
    """Calendar date of `now` in the reference timezone, as YYYY-MM-DD."""
    return now.astimezone(ZoneInfo(timezone)).strftime("%Y-%m-%d")


def generate_daily_seed(date_string: str) -> int:
    """Rolling base 31 hash over the UTF-16 code units, reduced at every step.

    Args:
        date_string (str): Any string, normally YYYY-MM-DD

    Returns:
        int: Seed in [0, 233280)
    """
    data = date_string.encode("utf-16-le")
    seed = 0
    for i in range(0, len(data), 2):
        code_unit = int.from_bytes(data[i : i + 2], "little")
        seed = (seed * SEED_BASE + code_unit) % SEED_MODULUS
    return seed


def select_locator(
    seed: int, level: Level, chapters: Optional[Sequence[Dict[str, Any]]] = None
) -> CorpusLocator:
    """Pick the part of the corpus the challenge is drawn from.

    Args:
        seed (int): Seed of the day
        level (Level): Difficulty level
        chapters (Sequence[dict], optional): Surah listing from the corpus API, needed for easy and medium

    Raises:
        ValueError: easy or medium without a listing
        EmptyCorpusError: The listing has no surah inside the level's band

    Returns:
        CorpusLocator: surah, juz or page to fetch
    """
    if level in SURAH_RANGES:
        if chapters is None:
            raise ValueError(f"{level.value} needs the surah listing")
        start, end = SURAH_RANGES[level]
        candidates = [chapter for chapter in chapters if start <= chapter["number"] <= end]
        if not candidates:
            raise EmptyCorpusError(f"No surahs available for {level.value}")
        return CorpusLocator("surah", candidates[seed % len(candidates)]["number"])
    if level == Level.hard:
        return CorpusLocator("juz", seed % JUZ_COUNT + 1)
    return CorpusLocator("page", seed % PAGE_COUNT + 1)


def _window(pool: List[Dict[str, Any]], start: int) -> List[Dict[str, Any]]:
    return pool[start : start + WINDOW_LENGTH]


def extract_window(units: Sequence[Dict[str, Any]], seed: int, level: Level) -> List[Dict[str, Any]]:
    """Cut the run of up to five consecutive verses shown to the player.

    For juz and page levels the pool is first narrowed to the surah of the first
    verse, without the opening verse of any surah. A pool shorter than the window
    is returned whole.

    Raises:
        EmptyCorpusError: Nothing to choose from
    """
    if not units:
        raise EmptyCorpusError("Corpus returned no verses")

    if level in SURAH_RANGES:
        pool = list(units)
        return _window(pool, seed % max(len(pool) - (WINDOW_LENGTH - 1), 1))

    surah_number = units[0]["surah"]["number"]
    pool = [
        unit
        for unit in units
        if unit["surah"]["number"] == surah_number and unit["numberInSurah"] != 1
    ]
    if not pool:
        raise EmptyCorpusError(f"No verses left in surah {surah_number} after filtering")
    return _window(pool, seed % max(len(pool) - WINDOW_LENGTH, 1))
