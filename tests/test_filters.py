"""Unit tests for filter normalization and application."""

from __future__ import annotations

from survey_core.filters import SurveyFilters, apply_filters, filter_options, normalize_filters
from survey_core.schema import classify_columns


def test_normalize_drops_unknown_and_all_tokens(survey_records):
    schema = classify_columns(survey_records)
    filt = normalize_filters(
        {"selections": {"소속1": "A", "소속2": "전체", "SEQ": "0001", "직급": "과장"}, "top_n": "5"},
        schema=schema,
    )
    assert filt.selections == {"소속1": "A"}
    assert filt.top_n == 5


def test_normalize_clamps_top_n(survey_records):
    schema = classify_columns(survey_records)
    assert normalize_filters({"top_n": "many"}, schema=schema).top_n == 3
    assert normalize_filters({"top_n": 500}, schema=schema).top_n == 20


def test_apply_filters(survey_records):
    assert len(apply_filters(survey_records, SurveyFilters())) == 10
    subset = apply_filters(survey_records, SurveyFilters(selections={"소속1": "A", "소속2": "A1"}))
    assert [r["SEQ"] for r in subset] == ["0001", "0002", "0007", "0008"]


def test_filter_options(survey_records):
    options = filter_options(survey_records, classify_columns(survey_records))
    assert options == {"소속1": ["A", "B"], "소속2": ["A1", "A2", "B1", "B2"]}
