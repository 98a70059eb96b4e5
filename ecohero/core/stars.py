"""Star rating policy.

A mini-game reports ``score`` out of ``max_score``; the ratio is bucketed into
0-3 stars. Levels without measurable scoring report ``max_score == 0`` and are
treated as fully successful on completion.
"""

from __future__ import annotations

import math

MAX_STARS = 3
THREE_STAR_RATIO = 0.9
TWO_STAR_RATIO = 0.6

DEFAULT_GREEN_POINTS_PER_STAR = 5


def calculate_stars(score: float, max_score: float) -> int:
    """Return the star rating (0-3) for a single attempt."""
    if not (math.isfinite(score) and math.isfinite(max_score)):
        raise ValueError(f"score and max_score must be finite, got {score}/{max_score}")
    if max_score < 0:
        raise ValueError(f"max_score must be >= 0, got {max_score}")
    if max_score == 0:
        return MAX_STARS
    ratio = max(0.0, min(1.0, score / max_score))
    if ratio >= THREE_STAR_RATIO:
        return 3
    if ratio >= TWO_STAR_RATIO:
        return 2
    if ratio > 0:
        return 1
    return 0


def clamp_stars(value: int) -> int:
    """Normalise an externally decided star count into 0..MAX_STARS."""
    return max(0, min(MAX_STARS, int(value)))


def green_points(stars: int, points_per_star: int = DEFAULT_GREEN_POINTS_PER_STAR) -> int:
    """Green score earned by an attempt. Never negative."""
    return max(0, clamp_stars(stars) * int(points_per_star))
