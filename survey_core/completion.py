from __future__ import annotations

from typing import List, Sequence

from survey_core.data import to_number
from survey_core.models import SurveyRecord, SurveySchema


def is_complete(record: SurveyRecord, schema: SurveySchema) -> bool:
    """Whether a respondent finished the survey.

    An explicit status column decides by exact match with the completed token.
    Without one, every score column must hold a positive number.
    """
    if schema.status_column is not None:
        return record.get(schema.status_column) == schema.completed_token
    for col in schema.score_columns:
        num = to_number(record.get(col))
        if num is None or num <= 0:
            return False
    return True


def completion_flags(records: Sequence[SurveyRecord], schema: SurveySchema) -> List[bool]:
    return [is_complete(r, schema) for r in records]
