"""Unit tests for category scores, question statistics and the importance matrix."""

from __future__ import annotations

from survey_core.metrics_categories import (
    analyze_category,
    category_heatmap,
    category_scores,
    importance_matrix,
    improvement_potential,
    question_stats,
    score_distribution,
    strengths,
    top_issues,
)
from survey_core.quadrant import MAINTAIN_REINFORCE, UNKNOWN_QUADRANT, classify


def test_single_category_end_to_end(survey_records):
    scores = category_scores(survey_records)
    assert len(scores) == 1
    engagement = scores[0]
    assert engagement.category == "engagement"
    assert engagement.count == 30
    assert engagement.score == 77.3
    assert engagement.satisfaction == engagement.score
    assert engagement.importance is None
    assert engagement.question_ids == [f"engagement_Q{i}" for i in range(1, 6)]


def test_category_without_observations_is_kept():
    records = [
        {"상태": "진단완료", "001": 4, "010": ""},
        {"상태": "미진단", "001": "", "010": 5},
    ]
    scores = {s.category: s for s in category_scores(records)}
    assert scores["몰입도"].score == 80.0
    assert scores["몰입도"].count == 1
    assert scores["조직정렬"].score == 0.0
    assert scores["조직정렬"].count == 0


def test_hundred_point_scores_are_not_rescaled():
    records = [
        {"상태": "진단완료", "culture_Q1": 80, "culture_Q2": 70},
        {"상태": "진단완료", "culture_Q1": 61, "culture_Q2": ""},
    ]
    (score,) = category_scores(records)
    assert score.score == 70.3
    assert score.count == 3


def test_importance_from_dedicated_questions():
    records = [
        {"상태": "진단완료", "몰입도_Q1": 4, "리더십_Q1": 2, "중요도_몰입": 5},
        {"상태": "진단완료", "몰입도_Q1": 3, "리더십_Q1": 2, "중요도_몰입": 4},
    ]
    scores = {s.category: s for s in category_scores(records)}
    assert scores["몰입도"].score == 70.0
    assert scores["몰입도"].importance == 90.0
    assert scores["리더십"].importance is None

    points = {p.category: p for p in importance_matrix(list(scores.values()))}
    assert (points["몰입도"].x, points["몰입도"].y) == (70.0, 90.0)
    assert points["리더십"].y is None
    assert classify(points["몰입도"].y, points["몰입도"].x) is MAINTAIN_REINFORCE
    assert classify(points["리더십"].y, points["리더십"].x) is UNKNOWN_QUADRANT


def test_category_scores_are_idempotent(survey_records):
    assert category_scores(survey_records) == category_scores(survey_records)


def test_question_stats_use_all_records(survey_records):
    stats = {q.question_id: q for q in question_stats(survey_records)}
    q1 = stats["engagement_Q1"]
    assert q1.count == 7
    assert q1.score == 3.7
    assert q1.category == "engagement"


def test_question_stats_population_std():
    records = [
        {"상태": "진단완료", "a_Q1": 2},
        {"상태": "진단완료", "a_Q1": 4},
    ]
    (q,) = question_stats(records)
    assert q.score == 3.0
    assert q.std_dev == 1.0


def test_top_issues_and_strengths(survey_records):
    stats = question_stats(survey_records)
    issues = top_issues(stats, limit=2)
    best = strengths(stats, limit=2)
    assert len(issues) == 2 and len(best) == 2
    assert issues[0]["score"] <= issues[1]["score"]
    assert best[0]["score"] >= best[1]["score"]


def test_score_distribution_on_hundred_scale(survey_records):
    dist = score_distribution(survey_records)
    assert sum(dist.values()) == 31
    assert dist["0-19"] == 0
    assert dist["80-100"] > 0


def test_heatmap_by_organization(survey_records):
    heat = category_heatmap(survey_records)
    assert heat["groups"] == ["A", "B"]
    assert heat["rows"] == [{"category": "engagement", "scores": {"A": 77.3, "B": 77.3}}]


def test_analyze_category(survey_records):
    analysis = analyze_category(survey_records, "engagement")
    assert analysis.satisfaction == 77.3
    assert analysis.importance is None
    assert analysis.quadrant == UNKNOWN_QUADRANT.name
    assert analysis.improvement_potential == 2.7
    assert analysis.std_dev > 0
    assert [d["name"] for d in analysis.department_comparison] == ["A", "B"]
    assert analyze_category(survey_records, "nope") is None


def test_improvement_potential_never_negative():
    assert improvement_potential(92.0) == 0.0
    assert improvement_potential(61.5) == 18.5


def test_empty_input_returns_empty_aggregates():
    assert category_scores([]) == []
    assert question_stats([]) == []
    assert importance_matrix([]) == []
    assert category_heatmap([]) == {"groups": [], "rows": []}


def test_outlier_in_one_category_leaves_other_categories_scaled():
    records = [{"상태": "진단완료", "a_Q1": 4, "b_Q1": 4} for _ in range(9)]
    before = {s.category: s.score for s in category_scores(records)}
    assert before == {"a": 80.0, "b": 80.0}

    records.append({"상태": "진단완료", "a_Q1": 4, "b_Q1": 10})
    after = {s.category: s.score for s in category_scores(records)}
    assert after["a"] == 80.0
    assert after["b"] == 4.6


def test_score_distribution_scales_each_category_separately():
    records = [
        {"상태": "진단완료", "a_Q1": 5, "b_Q1": 10},
        {"상태": "진단완료", "a_Q1": 4, "b_Q1": 90},
    ]
    dist = score_distribution(records)
    assert dist["80-100"] == 3
    assert dist["0-19"] == 1
