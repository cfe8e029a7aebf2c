"""Unit tests for column classification and category inference."""

from __future__ import annotations

from survey_core import schema as schema_module
from survey_core.config import UNCATEGORIZED
from survey_core.models import ColumnKind
from survey_core.schema import classify_column, classify_columns, infer_categories


def test_kinds_follow_allow_lists_and_values(survey_records):
    schema = classify_columns(survey_records)
    assert schema.kinds["SEQ"] is ColumnKind.IGNORED
    assert schema.kinds["상태"] is ColumnKind.IGNORED
    assert schema.kinds["소속1"] is ColumnKind.FILTER
    assert schema.score_columns == tuple(f"engagement_Q{i}" for i in range(1, 6))
    assert schema.status_column == "상태"
    assert schema.completed_token == "진단완료"
    assert schema.primary_group_column == "소속1"
    assert schema.team_group_column == "소속2"


def test_five_point_scale_detected(survey_records):
    schema = classify_columns(survey_records)
    assert {schema.scale_of(c) for c in schema.score_columns} == {5}


def test_hundred_point_scale_detected():
    records = [{"상태": "진단완료", "culture_Q1": 80, "culture_Q2": 65}]
    schema = classify_columns(records)
    assert schema.scale_of("culture_Q1") == schema.scale_of("culture_Q2") == 100


def test_scale_is_decided_per_category():
    records = [
        {"상태": "진단완료", "a_Q1": 4, "a_Q2": 5, "b_Q1": 4},
        {"상태": "진단완료", "a_Q1": 3, "a_Q2": 2, "b_Q1": 10},
    ]
    schema = classify_columns(records)
    assert schema.scale_of("a_Q1") == schema.scale_of("a_Q2") == 5
    assert schema.scale_of("b_Q1") == 100


def test_fixed_scale_setting_overrides_detection(monkeypatch):
    monkeypatch.setattr(schema_module, "SCORE_SCALE", 100)
    records = [{"상태": "진단완료", "a_Q1": 4, "b_Q1": 5}]
    schema = classify_columns(records)
    assert schema.scale_of("a_Q1") == schema.scale_of("b_Q1") == 100


def test_category_strategy_recorded(survey_records):
    assert classify_columns(survey_records).category_strategy == "prefix"
    numeric = classify_columns([{"상태": "진단완료", "001": 4, "009": 3}])
    assert numeric.category_strategy == "numeric"


def test_classify_column_precedence():
    assert classify_column("054", 3) is ColumnKind.FREE_TEXT
    assert classify_column("012", "") is ColumnKind.SCORE
    assert classify_column("comment", "great team") is ColumnKind.IGNORED
    assert classify_column("Q9", 150) is ColumnKind.IGNORED
    assert classify_column("Q9", 0) is ColumnKind.IGNORED
    assert classify_column("입사연도", 2015) is ColumnKind.FILTER


def test_prefix_strategy():
    strategy, categories = infer_categories(["리더십_Q1", "리더십_Q2", "협업_Q1", "overall"])
    assert strategy == "prefix"
    assert categories == {
        "리더십": ("리더십_Q1", "리더십_Q2"),
        "협업": ("협업_Q1",),
        UNCATEGORIZED: ("overall",),
    }


def test_numeric_strategy_uses_code_buckets():
    strategy, categories = infer_categories(["001", "007", "008", "060"])
    assert strategy == "numeric"
    assert categories == {"몰입도": ("001", "007"), "조직정렬": ("008",), UNCATEGORIZED: ("060",)}


def test_importance_columns_attach_to_categories():
    records = [
        {"상태": "진단완료", "몰입도_Q1": 4, "리더십_Q1": 3, "중요도_몰입": 5, "중요도_복지": 2}
    ]
    schema = classify_columns(records)
    assert "중요도" not in schema.categories
    assert schema.importance_columns == {"몰입도": ("중요도_몰입",)}
    assert schema.category_of("중요도_몰입") == "몰입도"


def test_empty_batch_gives_empty_schema():
    schema = classify_columns([])
    assert schema.score_columns == ()
    assert schema.status_column is None
