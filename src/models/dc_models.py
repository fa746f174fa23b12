from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Any, Dict, List, Optional


class Level(str, Enum):
    easy = "easy"  # short surahs, 78..114
    medium = "medium"  # long surahs, 1..77
    hard = "hard"  # one juz
    veryHard = "veryHard"  # one mushaf page


class SignupModel(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginModel(BaseModel):
    username: str
    password: str


class TokenModel(BaseModel):
    token: str
    username: str


class MessageModel(BaseModel):
    message: str


class SubmitScoreModel(BaseModel):
    score: Optional[int] = Field(default=None, ge=0)
    level: Optional[str] = None


class RemoveScoreModel(BaseModel):
    username: Optional[str] = None
    level: Optional[str] = None


class LeaderboardEntryModel(BaseModel):
    username: str
    score: int = Field(ge=0)

    model_config = ConfigDict(from_attributes=True)


class LeaderboardUpdateModel(BaseModel):
    message: str
    leaderboard: List[LeaderboardEntryModel]


class CorpusLocatorModel(BaseModel):
    kind: str  # "surah", "juz" or "page"
    number: int


class SurahModel(BaseModel):
    id: int
    name: Optional[str] = None
    englishName: Optional[str] = None


class DailyChallengeModel(BaseModel):
    date: str
    level: Level
    seed: int
    locator: CorpusLocatorModel
    surah: SurahModel
    verses: List[Dict[str, Any]]
