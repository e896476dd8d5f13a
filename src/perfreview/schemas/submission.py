from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .employee import Employee


@dataclass(frozen=True, slots=True)
class CategoryField:
    """Static description of one score category on the evaluation form."""

    field: str
    label: str
    form_prefix: str
    api_key: str
    criteria: int


CATEGORY_FIELDS: tuple[CategoryField, ...] = (
    CategoryField("job_knowledge", "Job Knowledge", "jobKnowledgeScore", "job_knowledge", 3),
    CategoryField("quality_of_work", "Quality of Work", "qualityOfWorkScore", "quality_of_works", 5),
    CategoryField("adaptability", "Adaptability", "adaptabilityScore", "adaptability", 3),
    CategoryField("teamwork", "Teamwork", "teamworkScore", "teamworks", 3),
    CategoryField("reliability", "Reliability", "reliabilityScore", "reliabilities", 4),
    CategoryField("ethical", "Ethical", "ethicalScore", "ethicals", 4),
    CategoryField("customer_service", "Customer Service", "customerServiceScore", "customer_services", 5),
    CategoryField("managerial_skills", "Managerial Skills", "managerialSkillsScore", "managerial_skills", 6),
)


class CriterionEntry(BaseModel):
    """A single criterion answer; `score` is kept raw until aggregation."""

    score: Any = None
    comment: str | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class EvaluationSubmission(BaseModel):
    """Provider-neutral evaluation submission."""

    id: int | str | None = None
    employee: Employee | None = None
    evaluation_type: str | None = Field(default=None, alias="evaluationType")
    coverage_from: str | None = Field(default=None, alias="coverageFrom")
    coverage_to: str | None = Field(default=None, alias="coverageTo")

    job_knowledge: list[CriterionEntry] = Field(default_factory=list)
    quality_of_work: list[CriterionEntry] = Field(default_factory=list)
    adaptability: list[CriterionEntry] = Field(default_factory=list)
    teamwork: list[CriterionEntry] = Field(default_factory=list)
    reliability: list[CriterionEntry] = Field(default_factory=list)
    ethical: list[CriterionEntry] = Field(default_factory=list)
    customer_service: list[CriterionEntry] = Field(default_factory=list)
    managerial_skills: list[CriterionEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    @field_validator(*(category.field for category in CATEGORY_FIELDS), mode="before")
    @classmethod
    def _wrap_scalars(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [
            item if isinstance(item, (dict, CriterionEntry)) else {"score": item}
            for item in value
        ]

    def entries(self, field: str) -> list[CriterionEntry]:
        return list(getattr(self, field))
