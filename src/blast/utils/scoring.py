from __future__ import annotations

from blast.constants import MIN_MATCH_SIZE


def time_increment(count: int) -> int:
    """Seconds added to the countdown for clearing ``count`` cells."""

    if count < MIN_MATCH_SIZE:
        return 0
    return max(0, int(10.0 + ((count - 2) / 3.0) ** 2 * 20.0))


def score_increment(count: int) -> int:
    """Points awarded for clearing ``count`` cells."""

    if count < MIN_MATCH_SIZE:
        return 0
    return max(0, int((count - 1) * 80 + ((count - 2) / 5.0) ** 2))


def interaction_rewards(count: int) -> tuple[int, int]:
    return score_increment(count), time_increment(count)
