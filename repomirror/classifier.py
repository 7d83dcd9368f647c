"""Score tier classification.

Maps a numeric quality score onto one of three display tiers:

- GOLD               score >= 80
- SILVER             50 <= score < 80
- NEEDS_IMPROVEMENT  score < 50

Total over all integers: out-of-range scores still classify, range
checking belongs to the analysis service.
"""

from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    """Three-level quality classification derived from a score."""

    GOLD = "gold"
    SILVER = "silver"
    NEEDS_IMPROVEMENT = "needs_improvement"


#: Human-readable badge text for each tier.
TIER_LABELS: dict[Tier, str] = {
    Tier.GOLD: "Gold Standard",
    Tier.SILVER: "Silver Standard",
    Tier.NEEDS_IMPROVEMENT: "Needs Improvement",
}

GOLD_THRESHOLD = 80
SILVER_THRESHOLD = 50


def classify(score: int) -> Tier:
    """Return the display tier for *score*.

    Examples:
        >>> classify(80)
        <Tier.GOLD: 'gold'>
        >>> classify(50)
        <Tier.SILVER: 'silver'>
        >>> classify(-3)
        <Tier.NEEDS_IMPROVEMENT: 'needs_improvement'>
    """
    if score >= GOLD_THRESHOLD:
        return Tier.GOLD
    if score >= SILVER_THRESHOLD:
        return Tier.SILVER
    return Tier.NEEDS_IMPROVEMENT


def label_for(score: int) -> str:
    """Return the badge text for *score*."""
    return TIER_LABELS[classify(score)]
