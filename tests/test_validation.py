"""Unit tests for batch validation."""

from __future__ import annotations

from survey_core.validation import validate


def test_valid_batch(survey_records):
    result = validate(survey_records)
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


def test_empty_batch_is_invalid():
    result = validate([])
    assert not result.is_valid
    assert result.errors


def test_no_score_columns():
    records = [{"SEQ": "1", "상태": "진단완료", "소속1": "HR", "comment": "fine"}]
    result = validate(records)
    assert not result.is_valid
    assert any("score columns" in e for e in result.errors)


def test_missing_status_column(survey_records):
    records = [{k: v for k, v in r.items() if k != "상태"} for r in survey_records]
    result = validate(records)
    assert not result.is_valid
    assert any("status column" in e for e in result.errors)


def test_errors_are_collected_together():
    result = validate([{"SEQ": "1", "comment": "fine"}])
    assert len(result.errors) == 2


def test_missing_organization_is_only_a_warning(survey_records):
    records = [{k: v for k, v in r.items() if k != "소속1"} for r in survey_records]
    result = validate(records)
    assert result.is_valid
    assert result.warnings
