from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from survey_core.completion import completion_flags
from survey_core.config import (
    FIVE_POINT_FACTOR,
    IMPROVEMENT_TARGET,
    SCORE_DISTRIBUTION_BUCKETS,
    UNCATEGORIZED,
    UNCLASSIFIED_GROUP,
)
from survey_core.data import records_frame, round_half_up, valid_values
from survey_core.metrics_summary import group_label
from survey_core.models import (
    CategoryAnalysis,
    CategoryScore,
    MatrixPoint,
    QuestionStats,
    SurveyRecord,
    SurveySchema,
)
from survey_core.quadrant import classify
from survey_core.schema import resolve_schema


def scale_factor(schema: SurveySchema, column: str) -> float:
    return FIVE_POINT_FACTOR if schema.scale_of(column) == 5 else 1.0


def scaled_values(df: pd.DataFrame, cols: Sequence[str], schema: SurveySchema) -> np.ndarray:
    """Valid answers in `cols` on the 0-100 scale."""
    parts = [valid_values(df, [c]) * scale_factor(schema, c) for c in cols]
    return np.concatenate(parts) if parts else np.array([], dtype=float)


def _completed_frame(records: Sequence[SurveyRecord], schema: SurveySchema) -> pd.DataFrame:
    df = records_frame(records)
    if df.empty:
        return df
    return df[pd.Series(completion_flags(records, schema), index=df.index)]


def _mean(values: np.ndarray) -> Optional[float]:
    if not values.size:
        return None
    return round_half_up(float(values.mean()), 1)


def category_scores(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> List[CategoryScore]:
    """Per-category mean of completed responses on a 0-100 scale.

    Categories with no observations are kept with score 0 and count 0. Importance
    is None unless the batch carries importance questions for the category.
    """
    if not records:
        return []
    schema = resolve_schema(records, schema)
    done = _completed_frame(records, schema)

    out: List[CategoryScore] = []
    for category, cols in schema.categories.items():
        values = scaled_values(done, cols, schema)
        score = _mean(values) or 0.0
        importance = None
        imp_cols = schema.importance_columns.get(category)
        if imp_cols:
            importance = _mean(scaled_values(done, imp_cols, schema))
        out.append(
            CategoryScore(
                category=category,
                score=score,
                importance=importance,
                satisfaction=score,
                count=int(values.size),
                question_ids=list(cols),
            )
        )
    return out


def question_stats(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> List[QuestionStats]:
    """Mean and population standard deviation per score column over all records."""
    if not records:
        return []
    schema = resolve_schema(records, schema)
    df = records_frame(records)

    out: List[QuestionStats] = []
    for col in schema.score_columns:
        values = valid_values(df, [col])
        if not values.size:
            continue
        out.append(
            QuestionStats(
                question_id=col,
                category=schema.category_of(col) or UNCATEGORIZED,
                score=round_half_up(float(values.mean()), 1),
                std_dev=round_half_up(float(np.std(values)), 1),
                count=int(values.size),
            )
        )
    out.sort(key=lambda q: (-q.score, q.question_id))
    return out


def importance_matrix(scores: Sequence[CategoryScore]) -> List[MatrixPoint]:
    return [
        MatrixPoint(
            x=s.satisfaction,
            y=s.importance,
            label=s.category,
            value=s.score,
            category=s.category,
        )
        for s in scores
    ]


def top_issues(stats: Sequence[QuestionStats], limit: int = 3) -> List[Dict[str, Any]]:
    ranked = sorted(stats, key=lambda q: (q.score, q.question_id))
    return [{"issue": q.question_id, "score": q.score} for q in ranked[:limit]]


def strengths(stats: Sequence[QuestionStats], limit: int = 3) -> List[Dict[str, Any]]:
    ranked = sorted(stats, key=lambda q: (-q.score, q.question_id))
    return [{"strength": q.question_id, "score": q.score} for q in ranked[:limit]]


def score_distribution(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> Dict[str, int]:
    """Count of individual answers per 20-point band of the 0-100 scale."""
    dist = {label: 0 for label, _ in SCORE_DISTRIBUTION_BUCKETS}
    if not records:
        return dist
    schema = resolve_schema(records, schema)
    values = scaled_values(records_frame(records), schema.score_columns, schema)
    for v in values:
        for label, low in SCORE_DISTRIBUTION_BUCKETS:
            if v >= low:
                dist[label] += 1
                break
    return dist


def improvement_potential(score: float, target: float = IMPROVEMENT_TARGET) -> float:
    return max(0.0, round_half_up(target - score, 1))


def _group_values(records: Sequence[SurveyRecord], column: str) -> List[str]:
    return sorted({group_label(r.get(column)) for r in records})


def _records_in_group(records: Sequence[SurveyRecord], column: str, group: str) -> List[SurveyRecord]:
    return [r for r in records if group_label(r.get(column)) == group]


def category_heatmap(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> Dict[str, Any]:
    """Category score per primary organization (rows: categories, columns: groups)."""
    if not records:
        return {"groups": [], "rows": []}
    schema = resolve_schema(records, schema)
    column = schema.primary_group_column
    if column is None:
        groups = [UNCLASSIFIED_GROUP]
        subsets = {UNCLASSIFIED_GROUP: list(records)}
    else:
        groups = _group_values(records, column)
        subsets = {g: _records_in_group(records, column, g) for g in groups}

    by_group = {g: {s.category: s.score for s in category_scores(subset, schema)} for g, subset in subsets.items()}
    rows = [
        {"category": category, "scores": {g: by_group[g].get(category, 0.0) for g in groups}}
        for category in schema.categories
    ]
    return {"groups": groups, "rows": rows}


def analyze_category(
    records: Sequence[SurveyRecord],
    category: str,
    schema: Optional[SurveySchema] = None,
) -> Optional[CategoryAnalysis]:
    """Detail view for one category; None when the batch has no such category."""
    if not records:
        return None
    schema = resolve_schema(records, schema)
    if category not in schema.categories:
        return None

    score = next(s for s in category_scores(records, schema) if s.category == category)
    quadrant = classify(score.importance, score.satisfaction)

    values = scaled_values(_completed_frame(records, schema), schema.categories[category], schema)
    std_dev = round_half_up(float(np.std(values)), 1) if values.size else 0.0

    heatmap = category_heatmap(records, schema)
    row = next(r for r in heatmap["rows"] if r["category"] == category)
    comparison = [{"name": g, "score": row["scores"][g]} for g in heatmap["groups"]]

    return CategoryAnalysis(
        element=category,
        satisfaction=score.satisfaction,
        importance=score.importance,
        quadrant=quadrant.name,
        recommendation=quadrant.recommendation,
        department_comparison=comparison,
        std_dev=std_dev,
        improvement_potential=improvement_potential(score.score),
    )
