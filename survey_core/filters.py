from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from survey_core.config import ALL_TOKENS
from survey_core.models import SurveyRecord, SurveySchema


@dataclass(frozen=True)
class SurveyFilters:
    selections: Dict[str, str] = field(default_factory=dict)
    top_n: int = 3

    @property
    def is_empty(self) -> bool:
        return not self.selections


def _as_str(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    if s in ALL_TOKENS:
        return None
    return s


def normalize_filters(raw: dict, *, schema: SurveySchema) -> SurveyFilters:
    """Keep only selections on the batch's filter dimensions."""
    selections: Dict[str, str] = {}
    for dim, value in (raw.get("selections") or {}).items():
        if dim not in schema.filter_columns:
            continue
        s = _as_str(value)
        if s is not None:
            selections[dim] = s

    top_n = raw.get("top_n", 3)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = 3
    top_n = max(1, min(20, top_n))
    return SurveyFilters(selections=selections, top_n=top_n)


def apply_filters(records: Sequence[SurveyRecord], filters: SurveyFilters) -> List[SurveyRecord]:
    if filters.is_empty:
        return list(records)
    return [
        r
        for r in records
        if all(str(r.get(dim, "")).strip() == value for dim, value in filters.selections.items())
    ]


def _distinct(values: Iterable[object]) -> List[str]:
    return sorted({str(v).strip() for v in values if v is not None and str(v).strip()})


def filter_options(records: Sequence[SurveyRecord], schema: SurveySchema) -> Dict[str, List[str]]:
    return {dim: _distinct(r.get(dim) for r in records) for dim in schema.filter_columns}
