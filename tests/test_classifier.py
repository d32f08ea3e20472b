"""Tests for similarity tier classification."""

from __future__ import annotations

import math

import pytest

from codesim.errors import MalformedResponseError
from codesim.models.comparison import SimilarityResult
from codesim.services.classifier import (
    classify,
    classify_results,
    classify_score,
    tier_for,
)


@pytest.mark.parametrize(
    "score,label",
    [
        (0, "Very Low"),
        (19.999, "Very Low"),
        (20, "Low"),
        (39.99, "Low"),
        (40, "Medium"),
        (59.5, "Medium"),
        (60, "High"),
        (79.999, "High"),
        (80, "Very High"),
        (100, "Very High"),
    ],
)
def test_classify_boundaries(score: float, label: str) -> None:
    assert classify(score) == label


@pytest.mark.parametrize("score", [-0.01, 100.01, 250, math.nan, math.inf])
def test_out_of_range_scores_fail_loudly(score: float) -> None:
    with pytest.raises(MalformedResponseError):
        classify(score)


@pytest.mark.parametrize("score", [True, False, "75", None])
def test_non_numeric_scores_fail_loudly(score) -> None:
    with pytest.raises(MalformedResponseError):
        tier_for(score)
    with pytest.raises(MalformedResponseError):
        classify_score(score)


def test_tier_colors() -> None:
    assert tier_for(95).color == "red"
    assert tier_for(5).color == "green"
    assert classify_score(65.0).model_dump() == {
        "similarity": 65.0,
        "tier": "High",
        "color": "orange",
    }


def test_classify_results_sorts_highest_first() -> None:
    results = [
        SimilarityResult(fileId=1, fileName="a.py", language="PYTHON", similarity=12.0),
        SimilarityResult(fileId=2, fileName="b.py", language="PYTHON", similarity=88.0),
        SimilarityResult(fileId=3, fileName="c.py", language="PYTHON", similarity=45.0),
    ]
    classified = classify_results(results)
    assert [c.file_id for c in classified] == [2, 3, 1]
    assert [c.tier for c in classified] == ["Very High", "Medium", "Very Low"]


def test_classify_results_rejects_bad_score() -> None:
    results = [
        SimilarityResult(fileId=1, fileName="a.py", language="PYTHON", similarity=50.0),
        SimilarityResult(fileId=2, fileName="b.py", language="PYTHON", similarity=101.0),
    ]
    with pytest.raises(MalformedResponseError):
        classify_results(results)
