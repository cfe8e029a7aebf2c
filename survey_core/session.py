"""Upload session: the one batch the dashboard is currently showing.

Only the latest upload is honored. Each upload gets a token; a parse that
finishes after a newer upload (or a reset) is discarded.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from survey_core.data import parse_workbook
from survey_core.errors import ParseError
from survey_core.models import SurveyRecord, SurveySchema, ValidationResult
from survey_core.schema import classify_columns
from survey_core.validation import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurveySession:
    token: str
    filename: str
    records: List[SurveyRecord] = field(default_factory=list)
    schema: SurveySchema = field(default_factory=SurveySchema)
    validation: ValidationResult = field(default_factory=lambda: ValidationResult(is_valid=False))

    @classmethod
    def from_records(cls, records: List[SurveyRecord], *, token: str = "", filename: str = "") -> "SurveySession":
        schema = classify_columns(records)
        return cls(
            token=token,
            filename=filename,
            records=list(records),
            schema=schema,
            validation=validate(records, schema),
        )


@dataclass(frozen=True)
class UploadOutcome:
    session: Optional[SurveySession] = None
    error: Optional[str] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.session is not None and self.session.validation.is_valid


class UploadTracker:
    """Owns the active session; the UI creates one per user and keeps it alive."""

    def __init__(self, parser: Callable[[bytes], List[SurveyRecord]] = parse_workbook) -> None:
        self._parser = parser
        self._token: Optional[str] = None
        self._generation = 0
        self.current: Optional[SurveySession] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def begin(self) -> str:
        """Start a new upload, superseding any parse still in flight."""
        self._token = uuid.uuid4().hex
        return self._token

    @property
    def widget_key(self) -> str:
        """Key for the upload widget; changes on reset so the widget forgets its file."""
        return f"survey_upload_{self._generation}"

    def reset(self) -> None:
        self._token = None
        self._generation += 1
        self.current = None

    async def load(self, token: str, data: bytes, filename: str = "") -> UploadOutcome:
        try:
            records = await asyncio.to_thread(self._parser, data)
        except ParseError as exc:
            if token != self._token:
                logger.info("Discarding failed parse for superseded upload %s", token)
                return UploadOutcome(stale=True)
            logger.warning("Upload %s failed to parse: %s", filename or token, exc)
            self.current = None
            return UploadOutcome(error=str(exc))

        if token != self._token:
            logger.info("Discarding stale parse result for upload %s", token)
            return UploadOutcome(stale=True)

        session = SurveySession.from_records(records, token=token, filename=filename)
        self.current = session
        logger.info(
            "Loaded %s: %d records, valid=%s", filename or token, len(records), session.validation.is_valid
        )
        return UploadOutcome(session=session)
