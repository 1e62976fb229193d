"""
Audience overlap scoring.

A score is the average of the sub-checks both profiles can answer:
age-range intersection, location equality and interest-set overlap.
Fields missing from either profile are skipped rather than penalized.
"""

from typing import List, Optional

from .models import TargetAudienceProfile


def _interest_overlap(first: List[str], second: List[str]) -> float:
    a, b = set(first), set(second)
    common = a & b
    if not common:
        return 0.0
    return len(common) / max(len(a), len(b))


def calculate_audience_overlap(
    first: Optional[TargetAudienceProfile],
    second: Optional[TargetAudienceProfile],
) -> float:
    """
    Similarity between two audience profiles in [0, 1].

    Returns 0.0 when either profile is missing or the two share no
    comparable field.
    """
    if first is None or second is None:
        return 0.0

    score = 0.0
    checks = 0

    if first.age_range is not None and second.age_range is not None:
        checks += 1
        if first.age_range.intersects(second.age_range):
            score += 1.0

    if first.location is not None and second.location is not None:
        checks += 1
        if first.location == second.location:
            score += 1.0

    # An empty list is still a supplied field and scores 0
    if first.interests is not None and second.interests is not None:
        checks += 1
        score += _interest_overlap(first.interests, second.interests)

    return score / checks if checks else 0.0


__all__ = ["calculate_audience_overlap"]
