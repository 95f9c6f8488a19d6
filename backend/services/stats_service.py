"""Collection statistics computed from a list of games."""

import math
from collections.abc import Sequence

from backend.models.game import GameRecord, GameStats, GameStatus


def average_rating(games: Sequence[GameRecord]) -> float:
    """Mean rating of rated games, rounded half-up to one decimal.

    Unrated games count in neither the sum nor the divisor. Returns 0.0
    when nothing is rated.
    """
    ratings = [game.rating for game in games if game.rating is not None]
    if not ratings:
        return 0.0
    mean = sum(ratings) / len(ratings)
    return math.floor(mean * 10 + 0.5) / 10


def compute_stats(games: Sequence[GameRecord]) -> GameStats:
    by_status = {status.value: 0 for status in GameStatus}
    for game in games:
        by_status[game.status.value] += 1

    return GameStats(
        total=len(games),
        by_status=by_status,
        rated=sum(1 for game in games if game.rating is not None),
        average_rating=average_rating(games),
    )
