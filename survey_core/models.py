from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

SurveyRecord = Dict[str, object]


class ColumnKind(str, Enum):
    IGNORED = "ignored"
    FILTER = "filter"
    SCORE = "score"
    FREE_TEXT = "free_text"


@dataclass(frozen=True)
class SurveySchema:
    """Column classification computed once per batch."""

    columns: Tuple[str, ...] = ()
    kinds: Dict[str, ColumnKind] = field(default_factory=dict)
    score_columns: Tuple[str, ...] = ()
    filter_columns: Tuple[str, ...] = ()
    status_column: Optional[str] = None
    completed_token: Optional[str] = None
    primary_group_column: Optional[str] = None
    team_group_column: Optional[str] = None
    categories: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    importance_columns: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    category_strategy: str = "prefix"
    scales: Dict[str, int] = field(default_factory=dict)

    def has_column(self, name: str) -> bool:
        return name in self.kinds

    def scale_of(self, column: str) -> int:
        """5 or 100; columns without a detected scale are read as 0-100."""
        return self.scales.get(column, 100)

    def category_of(self, column: str) -> Optional[str]:
        for mapping in (self.categories, self.importance_columns):
            for category, cols in mapping.items():
                if column in cols:
                    return category
        return None


@dataclass(frozen=True)
class Summary:
    total_count: int = 0
    completed_count: int = 0
    incomplete_count: int = 0
    response_rate: int = 0
    avg_score: float = 0.0


@dataclass(frozen=True)
class GroupStats:
    name: str
    total: int = 0
    completed: int = 0
    incomplete: int = 0
    response_rate: int = 0
    parent: Optional[str] = None


@dataclass(frozen=True)
class CategoryScore:
    category: str
    score: float = 0.0
    importance: Optional[float] = None
    satisfaction: float = 0.0
    count: int = 0
    question_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class QuestionStats:
    question_id: str
    category: str
    score: float
    std_dev: float
    count: int


@dataclass(frozen=True)
class MatrixPoint:
    x: float
    y: Optional[float]
    label: str
    value: float
    category: str


@dataclass(frozen=True)
class Quadrant:
    key: str
    name: str
    color: str
    recommendation: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryAnalysis:
    element: str
    satisfaction: float
    importance: Optional[float]
    quadrant: str
    recommendation: str
    department_comparison: List[Dict[str, object]] = field(default_factory=list)
    std_dev: float = 0.0
    improvement_potential: float = 0.0
