"""Weighted overall rating for evaluation submissions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from ..schemas import CATEGORY_FIELDS, CriterionEntry, EvaluationSubmission

MAX_RATING = Decimal("5")

RATING_LABELS: tuple[tuple[float, str], ...] = (
    (4.5, "Outstanding"),
    (4.0, "Exceeds Expectations"),
    (3.5, "Meets Expectations"),
    (2.5, "Needs Improvement"),
)


@dataclass(slots=True)
class CategoryScore:
    """One weighted slot of the overall rating."""

    category: str
    label: str
    mean: float
    weight: float
    weighted: float
    valid_count: int


@dataclass(slots=True)
class RatingSummary:
    """Overall rating with the breakdown printed on the review report."""

    overall: float
    label: str
    passed: bool
    percentage: float
    breakdown: list[CategoryScore] = field(default_factory=list)
    category_means: dict[str, float] = field(default_factory=dict)


def parse_score(value: Any) -> Decimal | None:
    """Return the numeric value of a raw criterion score, or None if absent."""
    if isinstance(value, CriterionEntry):
        value = value.score
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def mean_score(values: Iterable[Any]) -> Decimal:
    """Mean of the valid scores; zero when none are valid."""
    valid = [score for score in (parse_score(value) for value in values) if score is not None]
    if not valid:
        return Decimal(0)
    return sum(valid, Decimal(0)) / len(valid)


def round_rating(value: Decimal | float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def rating_label(score: float) -> str:
    for threshold, label in RATING_LABELS:
        if score >= threshold:
            return label
    return "Unsatisfactory"


class ScoreAggregator:
    """Turn per-criterion scores into category means and one overall rating."""

    DEFAULT_WEIGHTS: dict[str, float] = {
        "job_knowledge": 0.20,
        "quality_of_work": 0.20,
        "adaptability": 0.10,
        "teamwork": 0.10,
        "reliability": 0.05,
        "ethical": 0.05,
        "customer_service": 0.30,
    }

    DEFAULT_PASS_THRESHOLD = 3.0

    _LABELS = {category.field: category.label for category in CATEGORY_FIELDS}

    def __init__(
        self,
        *,
        score_weights: dict[str, float] | None = None,
        pass_threshold: float | None = None,
    ) -> None:
        weights = dict(score_weights or self.DEFAULT_WEIGHTS)
        unknown = sorted(set(weights) - set(self._LABELS))
        if unknown:
            raise ValueError(f"Unknown score categories: {unknown}")
        total = sum(Decimal(str(weight)) for weight in weights.values())
        if total != Decimal(1):
            raise ValueError(f"Score weights must sum to 1.0, got {total}")
        self._score_weights = weights
        self._pass_threshold = (
            self.DEFAULT_PASS_THRESHOLD if pass_threshold is None else pass_threshold
        )

    def overall_rating(self, submission: EvaluationSubmission) -> float:
        return round_rating(self._weighted_total(submission))

    def category_means(self, submission: EvaluationSubmission) -> dict[str, float]:
        means: dict[str, float] = {}
        for category in CATEGORY_FIELDS:
            entries = submission.entries(category.field)
            if any(parse_score(entry) is not None for entry in entries):
                means[category.field] = float(mean_score(entries))
        return means

    def summarize(self, submission: EvaluationSubmission) -> RatingSummary:
        breakdown = [
            CategoryScore(
                category=name,
                label=self._LABELS[name],
                mean=float(mean),
                weight=weight,
                weighted=float(mean * Decimal(str(weight))),
                valid_count=count,
            )
            for name, weight, mean, count in self._weighted_slots(submission)
        ]
        overall = round_rating(self._weighted_total(submission))
        percentage = float(
            (Decimal(str(overall)) / MAX_RATING * 100).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
        )
        return RatingSummary(
            overall=overall,
            label=rating_label(overall),
            passed=overall >= self._pass_threshold,
            percentage=percentage,
            breakdown=breakdown,
            category_means=self.category_means(submission),
        )

    def _weighted_slots(
        self, submission: EvaluationSubmission
    ) -> list[tuple[str, float, Decimal, int]]:
        slots = []
        for name, weight in self._score_weights.items():
            entries = submission.entries(name)
            count = sum(1 for entry in entries if parse_score(entry) is not None)
            slots.append((name, weight, mean_score(entries), count))
        return slots

    def _weighted_total(self, submission: EvaluationSubmission) -> Decimal:
        total = sum(
            (mean * Decimal(str(weight)) for _, weight, mean, _ in self._weighted_slots(submission)),
            Decimal(0),
        )
        return min(max(total, Decimal(0)), MAX_RATING)
