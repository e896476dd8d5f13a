"""Template classification for evaluation submissions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..schemas import Employee, EvaluationSubmission, PositionRef

_TAG_NOISE = re.compile(r"[\s_\-]+")
_HEAD_OFFICE = "HEAD OFFICE"


class TemplateLabel(str, Enum):
    """Presentation template a submission is rendered with."""

    BRANCH_RANK_AND_FILE = "BranchRankAndFile"
    BRANCH_MANAGER = "BranchManager"
    HO_BASIC = "HoBasic"
    HO_RANK_AND_FILE = "HoRankAndFile"


class EvaluationTag(str, Enum):
    """Parsed form of the free-text `evaluationType` tag."""

    UNKNOWN = "Unknown"
    BRANCH_RANK_N_FILE = "BranchRankNFile"
    HO_BASIC = "HoBasic"
    HO_RANK_N_FILE = "HoRankNFile"
    BRANCH_BASIC = "BranchBasic"


class ResultsView(str, Enum):
    """Results modal variant chosen when a finished review is opened."""

    BRANCH_MANAGER = "BranchManager"
    BRANCH_RANK_AND_FILE = "BranchRankAndFile"
    BASIC = "Basic"
    DEFAULT = "Default"


@dataclass(frozen=True, slots=True)
class TagRule:
    tag: EvaluationTag
    label: TemplateLabel
    requires_head_office: bool
    rank_and_file: bool


# Evaluated in order; the first rule whose requirements hold wins.
TAG_RULES: tuple[TagRule, ...] = (
    TagRule(EvaluationTag.BRANCH_RANK_N_FILE, TemplateLabel.BRANCH_RANK_AND_FILE, False, True),
    TagRule(EvaluationTag.HO_BASIC, TemplateLabel.HO_BASIC, True, False),
    TagRule(EvaluationTag.HO_RANK_N_FILE, TemplateLabel.HO_RANK_AND_FILE, True, True),
    TagRule(EvaluationTag.BRANCH_BASIC, TemplateLabel.BRANCH_MANAGER, False, False),
)

_HEAD_OFFICE_EQUIVALENT = {
    EvaluationTag.BRANCH_RANK_N_FILE: EvaluationTag.HO_RANK_N_FILE,
    EvaluationTag.BRANCH_BASIC: EvaluationTag.HO_BASIC,
}


def normalize_tag(raw: str | None) -> str:
    return _TAG_NOISE.sub("", (raw or "").upper())


def parse_tag(raw: str | None) -> EvaluationTag:
    """Map a free-text tag onto one of the canonical tag forms."""
    tag = normalize_tag(raw)
    if not tag:
        return EvaluationTag.UNKNOWN
    is_rank_and_file = "RANK" in tag and "FILE" in tag
    if "BRANCH" in tag:
        if is_rank_and_file:
            return EvaluationTag.BRANCH_RANK_N_FILE
        if "BASIC" in tag:
            return EvaluationTag.BRANCH_BASIC
    if "HO" in tag:
        if is_rank_and_file:
            return EvaluationTag.HO_RANK_N_FILE
        if "BASIC" in tag:
            return EvaluationTag.HO_BASIC
    return EvaluationTag.UNKNOWN


def correct_tag(tag: EvaluationTag, employee: Employee | None) -> EvaluationTag:
    """Swap Branch tags for their Head Office equivalent on HO employees.

    HO tags on branch employees are left alone; their rule is skipped later.
    """
    if is_head_office(employee):
        return _HEAD_OFFICE_EQUIVALENT.get(tag, tag)
    return tag


def _names_head_office(value: str | None) -> bool:
    text = (value or "").strip().upper()
    return text == "HO" or _HEAD_OFFICE in text


def is_head_office(employee: Employee | None) -> bool:
    if employee is None:
        return False
    flat = employee.flat_branch()
    if flat is not None:
        return _names_head_office(flat) or "/HO" in flat.upper()
    branch = employee.primary_branch()
    if branch is None:
        return False
    return _names_head_office(branch.branch_name) or _names_head_office(branch.branch_code)


def is_branch(employee: Employee | None) -> bool:
    return not is_head_office(employee)


def is_branch_employee(employee: Employee | None) -> bool:
    """Branch staff with known branch data; unknown placement is not a branch."""
    if employee is None or employee.primary_branch() is None:
        return False
    return not is_head_office(employee)


def _listed_position(employee: Employee) -> str:
    positions = employee.positions
    if isinstance(positions, PositionRef):
        return (positions.label or "").upper()
    if isinstance(positions, str):
        return positions.upper()
    return ""


def is_area_manager(employee: Employee | None) -> bool:
    if employee is None or not employee.positions:
        return False
    return "AREA MANAGER" in employee.position_label().upper()


def is_manager_or_supervisor(employee: Employee | None) -> bool:
    if employee is None:
        return False
    label = _listed_position(employee)
    is_manager = "MANAGER" in label and "AREA MANAGER" not in label
    return is_manager or "SUPERVISOR" in label


def has_customer_service_group(submission: EvaluationSubmission) -> bool:
    return bool(submission.customer_service)


def has_managerial_skills_group(submission: EvaluationSubmission) -> bool:
    return bool(submission.managerial_skills)


class EvaluationClassifier:
    """Pick the presentation template for a submission.

    Rules are layered: a trusted explicit tag first, then the structural
    fallback for Head Office or branch employees. Every input yields exactly
    one label.
    """

    def __init__(self, rules: tuple[TagRule, ...] = TAG_RULES) -> None:
        self._rules = rules

    def classify(
        self,
        submission: EvaluationSubmission,
        employee: Employee | None = None,
    ) -> TemplateLabel:
        employee = employee if employee is not None else submission.employee
        head_office = is_head_office(employee)
        managerial = has_managerial_skills_group(submission)

        if submission.evaluation_type and submission.evaluation_type.strip():
            label = self._from_tag(submission, employee, head_office, managerial)
            if label is not None:
                return label

        if head_office:
            return TemplateLabel.HO_BASIC if managerial else TemplateLabel.HO_RANK_AND_FILE

        if not head_office:
            if managerial:
                return TemplateLabel.BRANCH_MANAGER
            if has_customer_service_group(submission):
                return TemplateLabel.BRANCH_RANK_AND_FILE
            return TemplateLabel.BRANCH_RANK_AND_FILE

        return TemplateLabel.HO_RANK_AND_FILE

    def _from_tag(
        self,
        submission: EvaluationSubmission,
        employee: Employee | None,
        head_office: bool,
        managerial: bool,
    ) -> TemplateLabel | None:
        tag = correct_tag(parse_tag(submission.evaluation_type), employee)
        if tag is EvaluationTag.UNKNOWN:
            return None
        for rule in self._rules:
            if rule.tag is not tag:
                continue
            if rule.requires_head_office != head_office:
                continue
            if rule.rank_and_file and managerial:
                continue
            return rule.label
        return None


def route_results_view(submission: EvaluationSubmission) -> ResultsView:
    """Choose the results modal variant from the employee and the categories present."""
    employee = submission.employee
    customer_service = has_customer_service_group(submission)
    managerial = has_managerial_skills_group(submission)

    if is_area_manager(employee):
        return ResultsView.BRANCH_MANAGER
    branch_employee = is_branch_employee(employee)
    if branch_employee and is_manager_or_supervisor(employee):
        return ResultsView.BRANCH_MANAGER
    if branch_employee and not customer_service and not managerial:
        return ResultsView.BRANCH_RANK_AND_FILE
    if managerial and not customer_service:
        return ResultsView.BASIC
    return ResultsView.DEFAULT
