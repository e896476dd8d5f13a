from __future__ import annotations

import pytest

from perfreview.core import (
    EvaluationClassifier,
    ResultsView,
    ReviewCore,
    ScoreAggregator,
    TemplateLabel,
    review_quarter,
    route_results_view,
)
from perfreview.schemas import Employee, EvaluationSubmission


def build_core() -> ReviewCore:
    return ReviewCore(aggregator=ScoreAggregator(), classifier=EvaluationClassifier())


def build_submission(**kwargs) -> EvaluationSubmission:
    defaults = {
        "id": 42,
        "employee": {
            "id": 9,
            "branches": [{"branch_name": "Davao Branch", "branch_code": "DVO"}],
            "positions": {"label": "Teller"},
        },
        "coverageFrom": "2025-07-01",
        "job_knowledge": [3, 4, 5],
        "quality_of_work": [4, 4, 4, 4, 4],
        "adaptability": [5, 5, 5],
        "teamwork": [3, 3, 3],
        "reliability": [4, 4, 4, 4],
        "ethical": [4, 4, 4, 4],
        "customer_service": [5, 5, 5, 5, 5],
    }
    defaults.update(kwargs)
    return EvaluationSubmission(**defaults)


def test_review_core_combines_rating_and_template():
    outcome = build_core().evaluate(build_submission())

    assert outcome.submission_id == 42
    assert outcome.employee_id == 9
    assert outcome.rating.overall == 4.3
    assert outcome.rating.passed is True
    assert outcome.template is TemplateLabel.BRANCH_RANK_AND_FILE
    assert outcome.results_view is ResultsView.DEFAULT
    assert outcome.quarter == "Q3 2025"


def test_review_core_handles_missing_employee():
    outcome = build_core().evaluate(build_submission(employee=None, coverageFrom=None))

    assert outcome.employee_id is None
    assert outcome.template is TemplateLabel.BRANCH_RANK_AND_FILE
    assert outcome.quarter == "Unknown"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2025-01-15", "Q1 2025"),
        ("2024-05-01T08:00:00", "Q2 2024"),
        ("2023-12-31", "Q4 2023"),
        (None, "Unknown"),
        ("", "Unknown"),
        ("not a date", "Unknown"),
    ],
)
def test_review_quarter(value: str | None, expected: str):
    assert review_quarter(value) == expected


def employee(branch: str, position: str) -> Employee:
    return Employee(branches=[{"branch_name": branch}], positions={"label": position})


def test_results_view_area_manager_gets_manager_view_anywhere():
    submission = EvaluationSubmission(
        employee=employee("Head Office", "Area Manager"),
        customer_service=[4],
        managerial_skills=[4],
    )

    assert route_results_view(submission) is ResultsView.BRANCH_MANAGER


def test_results_view_branch_supervisor_gets_manager_view():
    submission = EvaluationSubmission(employee=employee("Cebu Branch", "Cashier Supervisor"))

    assert route_results_view(submission) is ResultsView.BRANCH_MANAGER


def test_results_view_head_office_supervisor_with_managerial_is_basic():
    submission = EvaluationSubmission(
        employee=employee("Head Office", "IT Supervisor"),
        managerial_skills=[4, 4],
    )

    assert route_results_view(submission) is ResultsView.BASIC


def test_results_view_branch_rank_and_file_without_categories():
    submission = EvaluationSubmission(employee=employee("Cebu Branch", "Teller"))

    assert route_results_view(submission) is ResultsView.BRANCH_RANK_AND_FILE


def test_results_view_head_office_staff_defaults():
    submission = EvaluationSubmission(employee=employee("Head Office", "Accountant"))

    assert route_results_view(submission) is ResultsView.DEFAULT


def test_results_view_manager_without_branch_data_is_default():
    submission = EvaluationSubmission(employee=Employee(positions={"label": "Branch Manager"}))

    assert route_results_view(submission) is ResultsView.DEFAULT


def test_results_view_without_employee_is_not_branch():
    assert route_results_view(EvaluationSubmission()) is ResultsView.DEFAULT
    assert route_results_view(EvaluationSubmission(managerial_skills=[4])) is ResultsView.BASIC


def test_results_view_reads_position_label_only():
    submission = EvaluationSubmission(
        employee=Employee(branches=[{"branch_name": "Cebu Branch"}], positions={"name": "Branch Manager"}),
    )

    assert route_results_view(submission) is ResultsView.BRANCH_RANK_AND_FILE


def test_results_view_flat_slash_ho_branch_is_not_branch():
    submission = EvaluationSubmission(employee=Employee(branch="Makati/HO Annex", positions="Supervisor"))

    assert route_results_view(submission) is ResultsView.DEFAULT
