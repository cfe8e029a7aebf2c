"""Fixed column configuration for the LMS culture-survey export.

Changing the survey structure means editing these tables, not the pipeline.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

# Identifier / status / timestamp columns that never carry scores.
IGNORED_COLUMNS: Tuple[str, ...] = (
    "SEQ",
    "응답자ID",
    "이름",
    "아이디(E-mail)",
    "사번",
    "진단일시",
    "상태",
    "ID",
    "Name",
    "Email",
    "Employee ID",
    "Timestamp",
    "Status",
)

# Organizational / demographic dimensions offered as dashboard filters.
FILTER_COLUMNS: Tuple[str, ...] = (
    "소속1",
    "소속2",
    "소속3",
    "소속4",
    "직책",
    "직군",
    "직급",
    "입사연도",
    "성별",
    "근무지",
    "Organization",
    "Team",
    "Department",
    "Position",
    "Job Family",
    "Grade",
    "Hire Year",
    "Gender",
    "Location",
)

# Status header -> token that marks a finished response (exact match).
STATUS_COLUMNS: Dict[str, str] = {
    "상태": "진단완료",
    "Status": "Completed",
}

PRIMARY_GROUP_COLUMNS: Tuple[str, ...] = ("소속1", "Organization")
TEAM_GROUP_COLUMNS: Tuple[str, ...] = ("소속2", "Team")

# LMS question codes: 001-053 are scored items, 054-055 are free-text answers.
SCORE_COLUMN_PATTERN = re.compile(r"^0[0-4][0-9]|^05[0-3]")
TEXT_COLUMN_PATTERN = re.compile(r"^05[45]")
QUESTION_CODE_PATTERN = re.compile(r"^(\d{3})")

SCORE_MIN_EXCLUSIVE: float = 0.0
SCORE_MAX: float = 100.0
FIVE_POINT_MAX: float = 5.0
FIVE_POINT_FACTOR: float = 20.0
# 5 or 100 pins every score column to that scale; None detects it per
# category from the category's own answers.
SCORE_SCALE: Optional[int] = None

CATEGORY_SEPARATOR = "_"
UNCATEGORIZED = "uncategorized"
UNCLASSIFIED_GROUP = "unclassified"

# Inclusive question-code ranges for numerically coded questionnaires.
CATEGORY_BUCKETS: Tuple[Tuple[int, int, str], ...] = (
    (1, 7, "몰입도"),
    (8, 14, "조직정렬"),
    (15, 21, "커리어"),
    (22, 28, "협업"),
    (29, 35, "커뮤니케이션"),
    (36, 42, "리더십"),
    (43, 48, "직무만족도"),
    (49, 53, "조직문화"),
)

# Prefixes of dedicated importance questions, e.g. "중요도_몰입".
IMPORTANCE_PREFIXES: Tuple[str, ...] = ("중요도", "Importance")

# Values treated as "no selection" in a filter dimension.
ALL_TOKENS: Tuple[str, ...] = ("", "전체", "All")

QUADRANT_MIDPOINT: float = 50.0

RESPONSE_RATE_GOOD: int = 90
RESPONSE_RATE_WARNING: int = 70

# Overview alert fires when incomplete respondents exceed this share of the total.
LOW_RESPONSE_SHARE: float = 0.3

IMPROVEMENT_TARGET: float = 80.0

# (label, lower bound inclusive) on the 0-100 scale, highest first.
SCORE_DISTRIBUTION_BUCKETS: Tuple[Tuple[str, float], ...] = (
    ("80-100", 80.0),
    ("60-79", 60.0),
    ("40-59", 40.0),
    ("20-39", 20.0),
    ("0-19", 0.0),
)
