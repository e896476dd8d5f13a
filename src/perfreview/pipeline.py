"""Batch review pipeline assembly and execution."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List

import pendulum
import structlog

from . import __version__
from .adapters import ApiRecordAdapter, FormPayloadAdapter, SubmissionAdapter
from .core import ReviewCore, ReviewOutcome
from .schemas import EvaluationSubmission


class AdapterRegistry:
    """Registry mapping submission sources to adapters."""

    def __init__(self, adapters: Iterable[SubmissionAdapter]):
        self._adapters = {adapter.source: adapter for adapter in adapters}

    def get(self, source: str) -> SubmissionAdapter:
        try:
            return self._adapters[source]
        except KeyError as exc:
            raise KeyError(f"Unsupported source: {source!r}") from exc

    def sources(self) -> List[str]:
        return list(self._adapters.keys())


class SubmissionLoadError(ValueError):
    """Raised when submission loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[EvaluationSubmission]):
        super().__init__("Submission loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Submission loading failed: {self.errors}"


class SubmissionLoader:
    """Load evaluation submissions through adapters."""

    def __init__(self, registry: AdapterRegistry):
        self._registry = registry

    def load(self, path: Path) -> list[EvaluationSubmission]:
        submissions: list[EvaluationSubmission] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: record must be an object")
                    continue
                source = record.get("source")
                if not source:
                    errors.append(f"line {idx}: missing source field")
                    continue
                try:
                    adapter = self._registry.get(source)
                except KeyError:
                    errors.append(f"line {idx}: unsupported source '{source}'")
                    continue
                payload = record.get("payload", record)
                try:
                    submission_dict = adapter.parse_submission(payload)
                    submission = EvaluationSubmission.model_validate(submission_dict)
                except Exception as exc:  # noqa: BLE001
                    errors.append(f"line {idx}: {exc}")
                    continue
                submissions.append(submission)
        if errors:
            raise SubmissionLoadError(errors, submissions)
        return submissions


class OutputWriter:
    """Write the batch report: run metadata plus one entry per reviewed submission."""

    def write(self, path: Path, *, results: list[dict], errors: list[str]) -> dict:
        report = {
            "metadata": {
                "submission_count": len(results),
                "errors": errors,
                "timestamp": pendulum.now().to_iso8601_string(),
                "app_version": __version__,
            },
            "results": results,
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
        return report


class ReviewPipeline:
    """End-to-end batch scoring and classification."""

    def __init__(
        self,
        *,
        core: ReviewCore,
        registry: AdapterRegistry,
        submission_loader: SubmissionLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._core = core
        self._registry = registry
        self._submissions = submission_loader or SubmissionLoader(registry)
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        submissions_path: Path,
        output_path: Path,
        audit_logger: "AuditLogger | None" = None,
    ) -> list[dict]:
        load_errors: list[str] = []
        try:
            submissions = self._submissions.load(submissions_path)
        except SubmissionLoadError as exc:
            submissions = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("submissions.partial_load", errors=exc.errors)

        serialized_results: list[dict] = []

        for submission in submissions:
            with structlog.contextvars.bound_contextvars(submission_id=submission.id):
                outcome = self._core.evaluate(submission)
            serialized_entry = json.loads(
                json.dumps(asdict(outcome), default=_json_default, ensure_ascii=False)
            )
            serialized_results.append(serialized_entry)

            if audit_logger:
                audit_logger.record(submission, outcome)

            self._logger.info(
                "review.result",
                submission_id=outcome.submission_id,
                employee_id=outcome.employee_id,
                overall=outcome.rating.overall,
                label=outcome.rating.label,
                template=outcome.template.value,
                results_view=outcome.results_view.value,
            )

        self._writer.write(output_path, results=serialized_results, errors=load_errors)
        return serialized_results


def default_registry() -> AdapterRegistry:
    """Return the default adapter registry."""
    return AdapterRegistry(adapters=[FormPayloadAdapter(), ApiRecordAdapter()])


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class AuditLogger:
    """Append one JSON line per reviewed submission for later reconciliation."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, submission: EvaluationSubmission, outcome: ReviewOutcome) -> dict:
        entry = {
            "submission_id": outcome.submission_id,
            "employee_id": outcome.employee_id,
            "evaluation_type": submission.evaluation_type,
            "overall": outcome.rating.overall,
            "template": outcome.template.value,
            "results_view": outcome.results_view.value,
        }
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, ensure_ascii=False))
            handle.write("\n")
        return entry
