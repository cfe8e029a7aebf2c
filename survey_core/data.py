from __future__ import annotations

import io
import logging
import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from survey_core.config import SCORE_MAX, SCORE_MIN_EXCLUSIVE
from survey_core.errors import ParseError
from survey_core.models import SurveyRecord

logger = logging.getLogger(__name__)


def _cell_value(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if value is pd.NaT or value is pd.NA:
        return ""
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return isinstance(value, float) and math.isnan(value)


def read_grid(data: bytes) -> List[List[object]]:
    """Decode the first sheet of an XLSX workbook into a 2-D grid of cell values."""
    try:
        with pd.ExcelFile(io.BytesIO(data)) as xls:
            if not xls.sheet_names:
                raise ParseError("The workbook has no sheets.")
            raw = xls.parse(xls.sheet_names[0], header=None, dtype=object, keep_default_na=False)
    except ParseError:
        raise
    except Exception as exc:
        raise ParseError(f"Failed to read the workbook: {exc}") from exc
    return [[_cell_value(v) for v in row] for row in raw.itertuples(index=False, name=None)]


def normalize_grid(grid: Sequence[Sequence[object]]) -> List[SurveyRecord]:
    """Turn header + data rows into one record per respondent.

    Duplicate header names are kept as-is, so the right-most cell wins for that key.
    """
    if len(grid) < 2:
        raise ParseError("The sheet has no data rows below the header.")

    header = ["" if _is_blank(col) else str(col).strip() for col in grid[0]]
    dupes = sorted({c for c in header if header.count(c) > 1})
    if dupes:
        logger.warning("Duplicate header columns, last value wins: %s", dupes)

    records: List[SurveyRecord] = []
    for row in grid[1:]:
        if all(_is_blank(v) for v in row):
            continue
        record: SurveyRecord = {}
        for idx, col in enumerate(header):
            value = row[idx] if idx < len(row) else ""
            record[col] = "" if _is_blank(value) else value
        records.append(record)

    if not records:
        raise ParseError("The sheet has no non-empty data rows.")
    return records


def parse_workbook(data: bytes) -> List[SurveyRecord]:
    grid = read_grid(data)
    records = normalize_grid(grid)
    logger.debug("Parsed %d records, header: %s", len(records), list(records[0].keys()))
    return records


# ---------------- Numeric helpers ----------------
def to_number(value: object) -> Optional[float]:
    """Numeric view of a cell: numbers and numeric strings, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        out = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def is_valid_score(value: object) -> bool:
    num = to_number(value)
    return num is not None and SCORE_MIN_EXCLUSIVE < num <= SCORE_MAX


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def response_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(completed / total * 100))


def records_frame(records: Iterable[SurveyRecord]) -> pd.DataFrame:
    return pd.DataFrame.from_records(list(records))


def numeric_frame(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    """Score columns as floats; values outside (0, 100] become NaN."""
    cols = [c for c in cols if c in df.columns]
    out = pd.DataFrame(index=df.index)
    for col in cols:
        series = pd.to_numeric(df[col].map(to_number), errors="coerce")
        out[col] = series.where((series > SCORE_MIN_EXCLUSIVE) & (series <= SCORE_MAX))
    return out


def valid_values(df: pd.DataFrame, cols: Iterable[str]) -> np.ndarray:
    num = numeric_frame(df, cols)
    if num.empty:
        return np.array([], dtype=float)
    arr = num.to_numpy(dtype=float).ravel()
    return arr[~np.isnan(arr)]
