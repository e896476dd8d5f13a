from __future__ import annotations

import json

import pytest

from perfreview.adapters import ApiRecordAdapter, FormPayloadAdapter, SubmissionAdapter
from perfreview.schemas import EvaluationSubmission


def test_form_adapter_collects_numbered_scores():
    payload = {
        "id": 5,
        "employee": {"id": 1, "branches": [{"branch_name": "Head Office"}]},
        "evaluationType": "HoRankNFile",
        "coverageFrom": "2025-01-01",
        "jobKnowledgeScore1": 4,
        "jobKnowledgeScore2": "5",
        "jobKnowledgeScore3": "",
        "customerServiceScore1": 3,
        "managerialSkillsScore1": 4,
        "managerialSkillsScore7": 2,
    }

    parsed = FormPayloadAdapter().parse_submission(payload)
    submission = EvaluationSubmission.model_validate(parsed)

    assert submission.id == 5
    assert submission.evaluation_type == "HoRankNFile"
    assert [entry.score for entry in submission.job_knowledge] == [4, "5", ""]
    assert len(submission.customer_service) == 1
    assert submission.quality_of_work == []
    assert [entry.score for entry in submission.managerial_skills] == [4, 2]
    assert submission.employee is not None
    assert submission.employee.id == 1


def test_form_adapter_reads_nested_evaluation_data():
    payload = json.dumps({"evaluationData": {"teamworkScore1": 5, "teamworkScore4": 1}})

    submission = EvaluationSubmission.model_validate(FormPayloadAdapter().parse_submission(payload))

    assert [entry.score for entry in submission.teamwork] == [5, 1]


def test_api_adapter_maps_relation_arrays():
    record = {
        "id": 77,
        "employee": {"id": 2, "positions": {"label": "Branch Manager"}},
        "evaluation_type": "BranchBasic",
        "job_knowledge": [{"score": 4, "comment": "solid"}, {"score": 5}],
        "quality_of_works": [{"score": "3"}],
        "customer_services": [],
        "managerial_skills": [{"rating": 4}, 5],
    }

    submission = EvaluationSubmission.model_validate(ApiRecordAdapter().parse_submission(record))

    assert submission.evaluation_type == "BranchBasic"
    assert [entry.score for entry in submission.job_knowledge] == [4, 5]
    assert submission.job_knowledge[0].comment == "solid"
    assert [entry.score for entry in submission.quality_of_work] == ["3"]
    assert submission.customer_service == []
    assert [entry.score for entry in submission.managerial_skills] == [4, 5]


def test_adapters_detect_their_payloads():
    form = FormPayloadAdapter()
    api = ApiRecordAdapter()

    assert form.can_handle({}, {"source": "form"}) is True
    assert api.can_handle({}, {"source": "form"}) is False
    assert form.can_handle('{"jobKnowledgeScore1": 3}', {}) is True
    assert api.can_handle('{"customer_services": []}', {}) is True
    assert api.can_handle("{broken", {}) is False


def test_adapters_satisfy_protocol():
    assert isinstance(FormPayloadAdapter(), SubmissionAdapter)
    assert isinstance(ApiRecordAdapter(), SubmissionAdapter)


def test_invalid_payload_raises_value_error():
    with pytest.raises(ValueError):
        ApiRecordAdapter().parse_submission("{not json")
