"""
Shared fixtures: settings on a temporary SQLite file and an in-process corpus API.
"""

from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from src.load_secrets import Settings
from src.main import create_app

CORPUS_BASE_URL = "http://corpus.test/v1"
SHORT_SURAH = 108


def ayah_count(surah_number: int) -> int:
    return 3 if surah_number == SHORT_SURAH else 37


def make_ayah(surah_number: int, number_in_surah: int) -> Dict[str, Any]:
    return {
        "number": surah_number * 1000 + number_in_surah,
        "text": f"verse {surah_number}:{number_in_surah}",
        "numberInSurah": number_in_surah,
        "surah": {"number": surah_number, "englishName": f"Surah {surah_number}"},
    }


class FakeCorpus:
    """Answers the alquran.cloud paths used by the corpus client and records each request."""

    def __init__(self):
        self.requests: List[str] = []
        self.fail_with_status: int | None = None

    def chapters(self) -> List[Dict[str, Any]]:
        return [
            {
                "number": n,
                "name": f"name-{n}",
                "englishName": f"Surah {n}",
                "numberOfAyahs": ayah_count(n),
            }
            for n in range(1, 115)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        if self.fail_with_status is not None:
            return httpx.Response(self.fail_with_status, json={"code": self.fail_with_status})

        parts = path.removeprefix("/v1/").split("/")
        if parts == ["surah"]:
            data: Any = self.chapters()
        elif parts[0] == "surah":
            number = int(parts[1])
            data = {
                "number": number,
                "englishName": f"Surah {number}",
                "ayahs": [
                    {"number": i, "text": f"verse {number}:{i}", "numberInSurah": i}
                    for i in range(1, ayah_count(number) + 1)
                ],
            }
        elif parts[0] == "juz":
            first = int(parts[1]) + 1
            data = {
                "number": int(parts[1]),
                "ayahs": [make_ayah(first, i) for i in range(1, 9)]
                + [make_ayah(first + 1, i) for i in range(1, 7)],
            }
        elif parts[0] == "page":
            first = int(parts[1]) % 114 + 1
            data = {
                "number": int(parts[1]),
                "ayahs": [make_ayah(first, i) for i in range(10, 14)]
                + [make_ayah(first + 1, i) for i in range(1, 4)],
            }
        else:
            return httpx.Response(404, json={"code": 404, "data": "Not found"})
        return httpx.Response(200, json={"code": 200, "status": "OK", "data": data})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_corpus() -> FakeCorpus:
    return FakeCorpus()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'qurandle-test.sqlite3'}",
        jwt_secret_key="test-secret-key-with-enough-length",
        pepper_data="pepper",
        corpus_base_url=CORPUS_BASE_URL,
        corpus_timeout_seconds=2.0,
    )


@pytest.fixture
def client(settings, fake_corpus):
    app = create_app(settings, corpus_transport=fake_corpus.transport())
    with TestClient(app) as test_client:
        yield test_client
