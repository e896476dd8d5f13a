"""Adapter for flat evaluation form payloads."""

from __future__ import annotations

from typing import Any

from ..schemas import CATEGORY_FIELDS, EvaluationSubmission
from ._payload import first_present, load_payload


class FormPayloadAdapter:
    """Convert `jobKnowledgeScore1`-style form data into submission dicts.

    A category is present when at least one of its numbered keys appears in
    the payload, even with an empty value.
    """

    source = "form"

    def can_handle(self, blob: bytes | str | dict[str, Any], metadata: dict[str, Any]) -> bool:
        source = metadata.get("source")
        if source:
            return str(source).lower() == self.source
        try:
            data = load_payload(blob, source=self.source)
        except ValueError:
            return False
        return any(key.startswith(CATEGORY_FIELDS[0].form_prefix) for key in data)

    def parse_submission(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        data = load_payload(payload, source=self.source)
        data = data.get("evaluationData", data)

        groups = {
            category.field: self._collect(data, category.form_prefix, category.criteria)
            for category in CATEGORY_FIELDS
        }

        submission = EvaluationSubmission(
            id=first_present(data, "id", "submissionId"),
            employee=first_present(data, "employee"),
            evaluationType=first_present(data, "evaluationType", "evaluation_type"),
            coverageFrom=first_present(data, "coverageFrom", "coverage_from"),
            coverageTo=first_present(data, "coverageTo", "coverage_to"),
            **groups,
        )
        return submission.model_dump(mode="python", by_alias=True)

    @staticmethod
    def _collect(data: dict[str, Any], prefix: str, criteria: int) -> list[dict[str, Any]]:
        entries: list[dict[str, Any]] = []
        index = 1
        # Managerial skills has no fixed count; keep reading numbered keys.
        while index <= criteria or f"{prefix}{index}" in data:
            key = f"{prefix}{index}"
            if key in data:
                entries.append({"score": data[key]})
            index += 1
        return entries
