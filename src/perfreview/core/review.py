"""Review orchestration: rating plus template for one submission."""

from __future__ import annotations

from dataclasses import dataclass

import pendulum
from pendulum.parsing.exceptions import ParserError

from ..schemas import EvaluationSubmission
from .classification import EvaluationClassifier, ResultsView, TemplateLabel, route_results_view
from .scoring import RatingSummary, ScoreAggregator


@dataclass(slots=True)
class ReviewOutcome:
    """Everything the rendering layer needs for one submission."""

    submission_id: int | str | None
    employee_id: int | str | None
    rating: RatingSummary
    template: TemplateLabel
    results_view: ResultsView
    quarter: str


def review_quarter(coverage_from: str | None) -> str:
    """Quarter label such as "Q3 2025" for the coverage start date."""
    if not coverage_from:
        return "Unknown"
    try:
        parsed = pendulum.parse(coverage_from, strict=False)
    except (ValueError, ParserError):
        return "Unknown"
    if not isinstance(parsed, (pendulum.DateTime, pendulum.Date)):
        return "Unknown"
    return f"Q{parsed.quarter} {parsed.year}"


class ReviewCore:
    """Coordinates the aggregator and classifier for a submission."""

    def __init__(
        self,
        *,
        aggregator: ScoreAggregator,
        classifier: EvaluationClassifier,
    ) -> None:
        self._aggregator = aggregator
        self._classifier = classifier

    def evaluate(self, submission: EvaluationSubmission) -> ReviewOutcome:
        employee = submission.employee
        return ReviewOutcome(
            submission_id=submission.id,
            employee_id=employee.id if employee else None,
            rating=self._aggregator.summarize(submission),
            template=self._classifier.classify(submission, employee),
            results_view=route_results_view(submission),
            quarter=review_quarter(submission.coverage_from),
        )
