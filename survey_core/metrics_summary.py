from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from survey_core.completion import completion_flags
from survey_core.config import RESPONSE_RATE_GOOD, RESPONSE_RATE_WARNING, UNCLASSIFIED_GROUP
from survey_core.data import records_frame, response_rate, round_half_up, valid_values
from survey_core.models import GroupStats, Summary, SurveyRecord, SurveySchema
from survey_core.schema import resolve_schema

GroupKey = Union[str, Tuple[str, ...]]


def summary(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> Summary:
    if not records:
        return Summary()
    schema = resolve_schema(records, schema)
    flags = completion_flags(records, schema)
    total = len(records)
    completed = sum(flags)

    df = records_frame(records)
    values = valid_values(df[pd.Series(flags, index=df.index)], schema.score_columns)
    avg = round_half_up(float(values.mean()), 1) if values.size else 0.0

    return Summary(
        total_count=total,
        completed_count=completed,
        incomplete_count=total - completed,
        response_rate=response_rate(completed, total),
        avg_score=avg,
    )


def group_label(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return UNCLASSIFIED_GROUP
    s = str(value).strip()
    return s or UNCLASSIFIED_GROUP


def grouped_stats(
    records: Sequence[SurveyRecord],
    group_key: GroupKey,
    schema: Optional[SurveySchema] = None,
) -> List[GroupStats]:
    """Response counts per distinct value of one (or two nested) grouping columns.

    Blank values fall into the "unclassified" group; a key that is not a column of
    the batch yields a single "unclassified" group holding every record.
    """
    if not records:
        return []
    schema = resolve_schema(records, schema)
    keys = (group_key,) if isinstance(group_key, str) else tuple(group_key)
    flags = completion_flags(records, schema)

    if not keys or any(not k or not schema.has_column(k) for k in keys):
        completed = sum(flags)
        return [
            GroupStats(
                name=UNCLASSIFIED_GROUP,
                total=len(records),
                completed=completed,
                incomplete=len(records) - completed,
                response_rate=response_rate(completed, len(records)),
            )
        ]

    df = pd.DataFrame({f"k{i}": [group_label(r.get(k)) for r in records] for i, k in enumerate(keys)})
    df["completed"] = flags
    key_cols = [f"k{i}" for i in range(len(keys))]
    agg = df.groupby(key_cols, sort=False).agg(total=("completed", "size"), completed=("completed", "sum")).reset_index()

    out: List[GroupStats] = []
    for row in agg.itertuples(index=False):
        total = int(row.total)
        completed = int(row.completed)
        labels = [getattr(row, c) for c in key_cols]
        out.append(
            GroupStats(
                name=labels[-1],
                total=total,
                completed=completed,
                incomplete=total - completed,
                response_rate=response_rate(completed, total),
                parent=" / ".join(labels[:-1]) or None,
            )
        )
    out.sort(key=lambda g: (-g.response_rate, g.parent or "", g.name))
    return out


def team_stats(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> List[GroupStats]:
    schema = resolve_schema(records, schema)
    if schema.primary_group_column is None or schema.team_group_column is None:
        key = schema.primary_group_column or ""
        return grouped_stats(records, key, schema)
    return grouped_stats(records, (schema.primary_group_column, schema.team_group_column), schema)


def response_rate_status(rate: int) -> str:
    if rate >= RESPONSE_RATE_GOOD:
        return "good"
    if rate >= RESPONSE_RATE_WARNING:
        return "warning"
    return "risk"


def respondent_distribution(records: Sequence[SurveyRecord], field: str) -> List[Dict[str, object]]:
    counts: Dict[str, int] = {}
    for record in records:
        value = record.get(field)
        if value is None or value == "":
            continue
        key = str(value)
        counts[key] = counts.get(key, 0) + 1
    return [{"key": k, "count": c} for k, c in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]
