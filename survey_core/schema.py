from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from survey_core.config import (
    CATEGORY_BUCKETS,
    CATEGORY_SEPARATOR,
    FILTER_COLUMNS,
    FIVE_POINT_MAX,
    IGNORED_COLUMNS,
    IMPORTANCE_PREFIXES,
    PRIMARY_GROUP_COLUMNS,
    QUESTION_CODE_PATTERN,
    SCORE_COLUMN_PATTERN,
    SCORE_SCALE,
    STATUS_COLUMNS,
    TEAM_GROUP_COLUMNS,
    TEXT_COLUMN_PATTERN,
    UNCATEGORIZED,
)
from survey_core.data import is_valid_score, records_frame, valid_values
from survey_core.models import ColumnKind, SurveyRecord, SurveySchema

logger = logging.getLogger(__name__)


def classify_column(name: str, representative: object) -> ColumnKind:
    """Kind of a single column given its value in the representative record."""
    if name in IGNORED_COLUMNS:
        return ColumnKind.IGNORED
    if name in FILTER_COLUMNS:
        return ColumnKind.FILTER
    if TEXT_COLUMN_PATTERN.match(name):
        return ColumnKind.FREE_TEXT
    if SCORE_COLUMN_PATTERN.match(name) or is_valid_score(representative):
        return ColumnKind.SCORE
    return ColumnKind.IGNORED


def _prefix(column: str) -> Optional[str]:
    if CATEGORY_SEPARATOR not in column:
        return None
    head = column.split(CATEGORY_SEPARATOR, 1)[0].strip()
    return head or None


def is_importance_column(column: str) -> bool:
    return _prefix(column) in IMPORTANCE_PREFIXES


def bucket_category(column: str) -> str:
    match = QUESTION_CODE_PATTERN.match(column)
    if not match:
        return UNCATEGORIZED
    code = int(match.group(1))
    for low, high, label in CATEGORY_BUCKETS:
        if low <= code <= high:
            return label
    return UNCATEGORIZED


def prefix_category(column: str) -> str:
    return _prefix(column) or UNCATEGORIZED


def infer_categories(score_columns: Sequence[str]) -> Tuple[str, Dict[str, Tuple[str, ...]]]:
    """Group score columns into categories with a single strategy for the batch.

    Numerically coded questionnaires use the fixed code buckets; anything else
    uses the text before the separator.
    """
    if not score_columns:
        return "prefix", {}
    numeric = all(QUESTION_CODE_PATTERN.match(c) for c in score_columns)
    strategy = "numeric" if numeric else "prefix"
    infer = bucket_category if numeric else prefix_category

    grouped: Dict[str, List[str]] = {}
    for col in score_columns:
        grouped.setdefault(infer(col), []).append(col)
    return strategy, {k: tuple(v) for k, v in grouped.items()}


def match_importance(
    importance_columns: Sequence[str], categories: Sequence[str]
) -> Dict[str, Tuple[str, ...]]:
    """Attach importance questions to categories by keyword containment."""
    matched: Dict[str, List[str]] = {}
    for col in importance_columns:
        keyword = col.split(CATEGORY_SEPARATOR, 1)[1].strip() if CATEGORY_SEPARATOR in col else ""
        if not keyword:
            continue
        for category in categories:
            if category == UNCATEGORIZED:
                continue
            if keyword in category or category in keyword:
                matched.setdefault(category, []).append(col)
                break
        else:
            logger.info("Importance column %r matches no category", col)
    return {k: tuple(v) for k, v in matched.items()}


def detect_scale(df: pd.DataFrame, cols: Sequence[str]) -> int:
    """5 when every valid answer in these columns is at most 5, else 100."""
    if SCORE_SCALE is not None:
        return SCORE_SCALE
    values = valid_values(df, cols)
    return 5 if values.size and float(values.max()) <= FIVE_POINT_MAX else 100


def column_scales(
    df: pd.DataFrame,
    score_columns: Sequence[str],
    groups: Sequence[Sequence[str]],
) -> Dict[str, int]:
    """Scale per score column, decided once for each group of columns.

    Columns outside every group are scaled on their own.
    """
    scales: Dict[str, int] = {}
    for cols in groups:
        scale = detect_scale(df, cols)
        scales.update((c, scale) for c in cols)
    for col in score_columns:
        if col not in scales:
            scales[col] = detect_scale(df, [col])
    return scales


def _first_present(candidates: Sequence[str], columns: Sequence[str]) -> Optional[str]:
    for name in candidates:
        if name in columns:
            return name
    return None


def classify_columns(records: Sequence[SurveyRecord]) -> SurveySchema:
    """Infer the batch schema from the first record's shape.

    All rows are assumed to share the first row's key set; only scale detection
    looks at every record, one category at a time.
    """
    if not records:
        return SurveySchema()

    first = records[0]
    columns = tuple(first.keys())
    kinds = {col: classify_column(col, first.get(col)) for col in columns}

    score_columns = tuple(c for c in columns if kinds[c] is ColumnKind.SCORE)
    filter_columns = tuple(c for c in columns if kinds[c] is ColumnKind.FILTER)

    importance_cols = [c for c in score_columns if is_importance_column(c)]
    item_cols = [c for c in score_columns if c not in importance_cols]
    strategy, categories = infer_categories(item_cols)
    importance = match_importance(importance_cols, list(categories))

    status_column = _first_present(list(STATUS_COLUMNS), columns)
    completed_token = STATUS_COLUMNS[status_column] if status_column else None

    groups = list(categories.values()) + list(importance.values())
    scales = column_scales(records_frame(records), score_columns, groups)

    schema = SurveySchema(
        columns=columns,
        kinds=kinds,
        score_columns=score_columns,
        filter_columns=filter_columns,
        status_column=status_column,
        completed_token=completed_token,
        primary_group_column=_first_present(PRIMARY_GROUP_COLUMNS, columns),
        team_group_column=_first_present(TEAM_GROUP_COLUMNS, columns),
        categories=categories,
        importance_columns=importance,
        category_strategy=strategy,
        scales=scales,
    )
    logger.debug(
        "Schema: %d score, %d filter columns; strategy=%s; categories=%s; 5-point=%s",
        len(score_columns),
        len(filter_columns),
        strategy,
        list(categories),
        sorted({c for c, s in scales.items() if s == 5}),
    )
    return schema


def resolve_schema(records: Sequence[SurveyRecord], schema: Optional[SurveySchema]) -> SurveySchema:
    return schema if schema is not None else classify_columns(records)
