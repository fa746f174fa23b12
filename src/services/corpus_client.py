import logging
from typing import Any, Dict, List, Optional

import httpx

from src.domain.daily_seed import CorpusLocator
from src.exceptions import UpstreamDependencyError
from src.services.corpus_cache import CorpusCache

EDITION = "quran-uthmani"


class CorpusClient:
    """Read only client for the alquran.cloud API."""

    def __init__(self, client: httpx.AsyncClient, cache: Optional[CorpusCache] = None):
        self.client = client
        self.cache = cache

    @classmethod
    def create(
        cls,
        base_url: str,
        timeout: float,
        cache: Optional[CorpusCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CorpusClient":
        client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        return cls(client, cache)

    async def close(self) -> None:
        await self.client.aclose()

    async def _get_data(self, path: str) -> Any:
        """GET `path` and return the payload's "data" member

        Args:
            path (str): Path relative to the API base url

        Raises:
            UpstreamDependencyError: Timeout, transport error, non-2xx status or a payload without data

        Returns:
            Any: The "data" member of the response
        """
        if self.cache is not None:
            cached = await self.cache.get(path)
            if cached is not None:
                return cached

        try:
            response = await self.client.get(path)
            response.raise_for_status()
            data = response.json()["data"]
        except httpx.TimeoutException as e:
            raise UpstreamDependencyError(f"Corpus request {path} timed out") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamDependencyError(
                f"Corpus request {path} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamDependencyError(f"Corpus request {path} failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamDependencyError(f"Corpus request {path} returned a malformed payload") from e

        logging.debug(f"Fetched {path} from corpus")
        if self.cache is not None:
            await self.cache.set(path, data)
        return data

    async def list_chapters(self) -> List[Dict[str, Any]]:
        chapters = await self._get_data("surah")
        if not isinstance(chapters, list) or not all(
            isinstance(chapter, dict) and isinstance(chapter.get("number"), int)
            for chapter in chapters
        ):
            raise UpstreamDependencyError("Corpus surah listing is malformed")
        return chapters

    async def get_chapter(self, number: int) -> Dict[str, Any]:
        return await self._get_data(f"surah/{number}")

    async def get_juz(self, number: int) -> Dict[str, Any]:
        return await self._get_data(f"juz/{number}/{EDITION}")

    async def get_page(self, number: int) -> Dict[str, Any]:
        return await self._get_data(f"page/{number}/{EDITION}")

    async def fetch_verses(self, locator: CorpusLocator) -> List[Dict[str, Any]]:
        """Verses ("ayahs") of the surah, juz or page the locator points at

        Raises:
            UpstreamDependencyError: The payload has no verse list, or a verse lacks
                numberInSurah (and, for juz and page, surah.number)
        """
        fetchers = {
            "surah": self.get_chapter,
            "juz": self.get_juz,
            "page": self.get_page,
        }
        data = await fetchers[locator.kind](locator.number)
        verses = data.get("ayahs") if isinstance(data, dict) else None
        if not isinstance(verses, list) or not all(
            _is_verse(verse, needs_surah=locator.kind != "surah") for verse in verses
        ):
            raise UpstreamDependencyError(
                f"Corpus {locator.kind} {locator.number} returned malformed verses"
            )
        return verses


def _is_verse(verse: Any, needs_surah: bool) -> bool:
    if not isinstance(verse, dict) or not isinstance(verse.get("numberInSurah"), int):
        return False
    if not needs_surah:
        return True
    surah = verse.get("surah")
    return isinstance(surah, dict) and isinstance(surah.get("number"), int)
