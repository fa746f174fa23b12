"""Leaderboard merge rules, independent from storage."""

from typing import List

from src.models.dc_models import LeaderboardEntryModel

LEADERBOARD_SIZE = 10


def merge_score(
    entries: List[LeaderboardEntryModel],
    username: str,
    score: int,
    size: int = LEADERBOARD_SIZE,
) -> List[LeaderboardEntryModel]:
    """Merge one submission into a level's top list.

    A stored score is only ever raised. A new user is appended before sorting, so
    the cap is applied after ranking. The sort is stable: at equal score the entry
    that was already on the board stays ahead of newcomers.

    Args:
        entries (List[LeaderboardEntryModel]): Current top list, best first
        username (str): Submitting user
        score (int): Submitted score
        size (int, optional): Number of places kept. Defaults to 10.

    Returns:
        List[LeaderboardEntryModel]: New top list, best first
    """
    merged = [entry.model_copy() for entry in entries]
    for entry in merged:
        if entry.username == username:
            if score > entry.score:
                entry.score = score
            break
    else:
        merged.append(LeaderboardEntryModel(username=username, score=score))

    merged.sort(key=lambda entry: entry.score, reverse=True)
    return merged[:size]


def remove_entry(entries: List[LeaderboardEntryModel], username: str) -> List[LeaderboardEntryModel]:
    """Drop every entry of `username`, keeping the order of the rest."""
    return [entry for entry in entries if entry.username != username]
