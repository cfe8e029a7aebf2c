from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from survey_core.config import PRIMARY_GROUP_COLUMNS, STATUS_COLUMNS
from survey_core.models import SurveyRecord, SurveySchema, ValidationResult
from survey_core.schema import resolve_schema

logger = logging.getLogger(__name__)


def validate(records: Sequence[SurveyRecord], schema: Optional[SurveySchema] = None) -> ValidationResult:
    """Check a parsed batch against the minimum structure the dashboard needs.

    All problems are collected; nothing is raised.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not records:
        errors.append("The upload contains no response records.")
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    try:
        schema = resolve_schema(records, schema)
    except Exception as exc:
        logger.exception("schema inference failed")
        errors.append(f"Could not inspect the columns: {exc}")
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    if schema.status_column is None:
        errors.append(
            "Required status column is missing (expected one of: %s)." % ", ".join(STATUS_COLUMNS)
        )
    if not schema.score_columns:
        errors.append("No score columns were detected; the file has no numeric survey responses.")
    if schema.primary_group_column is None:
        warnings.append(
            "Organization column is missing (expected one of: %s); grouped statistics will use a single "
            "'unclassified' group." % ", ".join(PRIMARY_GROUP_COLUMNS)
        )

    for msg in warnings:
        logger.warning(msg)
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
