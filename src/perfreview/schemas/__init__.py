"""Pydantic schema definitions for provider-neutral review data."""

from __future__ import annotations

from .employee import BranchRef, Employee, PositionRef
from .submission import (
    CATEGORY_FIELDS,
    CategoryField,
    CriterionEntry,
    EvaluationSubmission,
)

__all__ = [
    "BranchRef",
    "CATEGORY_FIELDS",
    "CategoryField",
    "CriterionEntry",
    "Employee",
    "EvaluationSubmission",
    "PositionRef",
]
