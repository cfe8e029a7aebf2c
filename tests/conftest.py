from __future__ import annotations

import io
from typing import List

import pytest
from openpyxl import Workbook

SCORE_COLS = [f"engagement_Q{i}" for i in range(1, 6)]

COMPLETED_SCORES = [
    [5, 4, 4, 3, 5],
    [4, 4, 3, 3, 4],
    [3, 2, 4, 5, 5],
    [5, 5, 5, 4, 4],
    [2, 3, 3, 4, 3],
    [4, 4, 4, 4, 4],
]

INCOMPLETE_SCORES = [
    ["", "", "", "", ""],
    [0, 0, 0, 0, 0],
    [3, "", "", "", ""],
    [0, "", 0, "", 0],
]


def _record(seq: int, org: str, team: str, status: str, scores: list) -> dict:
    rec = {"SEQ": f"{seq:04d}", "이름": f"user{seq}", "소속1": org, "소속2": team, "상태": status}
    rec.update(dict(zip(SCORE_COLS, scores)))
    return rec


@pytest.fixture
def survey_records() -> List[dict]:
    """Ten respondents: six completed, four not started or partial."""
    records = []
    orgs = ["A", "A", "A", "B", "B", "B"]
    teams = ["A1", "A1", "A2", "B1", "B1", "B2"]
    for i, scores in enumerate(COMPLETED_SCORES):
        records.append(_record(i + 1, orgs[i], teams[i], "진단완료", scores))
    for i, scores in enumerate(INCOMPLETE_SCORES):
        org = "A" if i < 2 else "B"
        records.append(_record(i + 7, org, f"{org}1", "미진단", scores))
    return records


def workbook_bytes(rows: list) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def survey_workbook(survey_records) -> bytes:
    header = list(survey_records[0].keys())
    rows = [header] + [[r[c] if r[c] != "" else None for c in header] for r in survey_records]
    return workbook_bytes(rows)


@pytest.fixture
def make_workbook():
    return workbook_bytes
