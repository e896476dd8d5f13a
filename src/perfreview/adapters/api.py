"""Adapter for evaluation records returned by the review API."""

from __future__ import annotations

from typing import Any

from ..schemas import CATEGORY_FIELDS, EvaluationSubmission
from ._payload import first_present, load_payload


class ApiRecordAdapter:
    """Convert API records with per-category relation arrays."""

    source = "api"

    def can_handle(self, blob: bytes | str | dict[str, Any], metadata: dict[str, Any]) -> bool:
        source = metadata.get("source")
        if source:
            return str(source).lower() == self.source
        try:
            data = load_payload(blob, source=self.source)
        except ValueError:
            return False
        return any(category.api_key in data for category in CATEGORY_FIELDS)

    def parse_submission(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        data = load_payload(payload, source=self.source)

        groups = {
            category.field: [
                self._entry(item) for item in self._relation(data, category.api_key, category.field)
            ]
            for category in CATEGORY_FIELDS
        }

        submission = EvaluationSubmission(
            id=data.get("id"),
            employee=data.get("employee"),
            evaluationType=first_present(data, "evaluationType", "evaluation_type"),
            coverageFrom=first_present(data, "coverageFrom", "coverage_from"),
            coverageTo=first_present(data, "coverageTo", "coverage_to"),
            **groups,
        )
        return submission.model_dump(mode="python", by_alias=True)

    @staticmethod
    def _relation(data: dict[str, Any], api_key: str, field: str) -> list[Any]:
        items = first_present(data, api_key, field)
        if items is None:
            return []
        if not isinstance(items, list):
            return [items]
        return items

    @staticmethod
    def _entry(item: Any) -> dict[str, Any]:
        if isinstance(item, dict):
            return {
                "score": first_present(item, "score", "rating"),
                "comment": first_present(item, "comment", "comments", "explanation"),
            }
        return {"score": item}
