"""Rating and dashboard arithmetic over rows already fetched from the database."""

import math
from collections import Counter
from collections.abc import Iterable
from typing import Any

from store_ratings.core.permissions import Role
from store_ratings.models.rating import RATING_MAX, RATING_MIN


def average_rating(values: Iterable[int]) -> float:
    """
    Arithmetic mean rounded half-up to one decimal; 0 when there are no ratings.

    [5, 5, 4] -> 4.7, [] -> 0.
    """
    values = list(values)
    if not values:
        return 0
    mean = sum(values) / len(values)
    return math.floor(mean * 10 + 0.5) / 10


def rating_distribution(values: Iterable[int]) -> dict[int, int]:
    """Count of ratings per star value, highest first; every star 5..1 is present."""
    counts = Counter(values)
    return {star: counts.get(star, 0) for star in range(RATING_MAX, RATING_MIN - 1, -1)}


def count_by_role(roles: Iterable[str]) -> dict[str, int]:
    """Users per role. Roles with no users are omitted."""
    counts = Counter(Role(r).value for r in roles)
    return {role.value: counts[role.value] for role in Role if counts[role.value]}


def rating_summary(ratings: Iterable[Any]) -> tuple[float, int]:
    """(average, total) for a collection of Rating rows."""
    values = [r.rating for r in ratings]
    return average_rating(values), len(values)
