"""Core review components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .classification import (
    EvaluationClassifier,
    EvaluationTag,
    ResultsView,
    TemplateLabel,
    correct_tag,
    has_customer_service_group,
    has_managerial_skills_group,
    is_area_manager,
    is_branch,
    is_branch_employee,
    is_head_office,
    is_manager_or_supervisor,
    parse_tag,
    route_results_view,
)
from .polling import ResetApprovalPoller
from .review import ReviewCore, ReviewOutcome, review_quarter
from .scoring import CategoryScore, RatingSummary, ScoreAggregator, rating_label
from .signature import (
    SignatureDecodeError,
    SignatureLifecycle,
    SignatureState,
    decode_data_url,
    is_data_url,
    is_persisted_reference,
)

__all__ = [
    "CategoryScore",
    "EvaluationClassifier",
    "EvaluationTag",
    "RatingSummary",
    "ResetApprovalPoller",
    "ResultsView",
    "ReviewCore",
    "ReviewOutcome",
    "ScoreAggregator",
    "SignatureDecodeError",
    "SignatureLifecycle",
    "SignatureState",
    "TemplateLabel",
    "correct_tag",
    "decode_data_url",
    "has_customer_service_group",
    "has_managerial_skills_group",
    "is_area_manager",
    "is_branch",
    "is_branch_employee",
    "is_data_url",
    "is_head_office",
    "is_manager_or_supervisor",
    "is_persisted_reference",
    "parse_tag",
    "rating_label",
    "review_quarter",
    "route_results_view",
]
