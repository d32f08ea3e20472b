"""Similarity score classification.

Maps a 0-100 score to a display tier and semantic colour:

- [80, 100] -> Very High (red)
- [60, 80)  -> High (orange)
- [40, 60)  -> Medium (yellow)
- [20, 40)  -> Low (blue)
- [0, 20)   -> Very Low (green)

Scores outside [0, 100] are a contract violation by the analysis service
and raise MalformedResponseError instead of being clamped.
"""

from __future__ import annotations

import math
from enum import Enum

from codesim.errors import MalformedResponseError
from codesim.models.comparison import (
    ClassifiedResult,
    ClassifiedScore,
    SimilarityResult,
)


class SimilarityTier(Enum):
    """Tier label, inclusive lower bound, and semantic colour."""

    VERY_HIGH = ("Very High", 80.0, "red")
    HIGH = ("High", 60.0, "orange")
    MEDIUM = ("Medium", 40.0, "yellow")
    LOW = ("Low", 20.0, "blue")
    VERY_LOW = ("Very Low", 0.0, "green")

    def __init__(self, label: str, lower_bound: float, color: str) -> None:
        self.label = label
        self.lower_bound = lower_bound
        self.color = color


def tier_for(score: float) -> SimilarityTier:
    """Return the tier of ``score``; raise MalformedResponseError if out of range."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise MalformedResponseError(f"Similarity score is not a number: {score!r}")
    if math.isnan(score) or not 0 <= score <= 100:
        raise MalformedResponseError(f"Similarity score out of range [0, 100]: {score!r}")
    # Members are declared highest bound first
    for tier in SimilarityTier:
        if score >= tier.lower_bound:
            return tier
    return SimilarityTier.VERY_LOW


def classify(score: float) -> str:
    """Return the tier label for ``score`` (e.g. ``"Very High"``)."""
    return tier_for(score).label


def classify_score(score: float) -> ClassifiedScore:
    tier = tier_for(score)
    return ClassifiedScore(similarity=score, tier=tier.label, color=tier.color)


def classify_results(results: list[SimilarityResult]) -> list[ClassifiedResult]:
    """Classify every result and sort by similarity, highest first.

    One out-of-range score fails the whole batch.
    """
    classified = []
    for r in results:
        tier = tier_for(r.similarity)
        classified.append(
            ClassifiedResult(
                file_id=r.file_id,
                file_name=r.file_name,
                language=r.language,
                similarity=r.similarity,
                tier=tier.label,
                color=tier.color,
            )
        )
    classified.sort(key=lambda c: c.similarity, reverse=True)
    return classified
