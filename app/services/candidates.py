"""Candidate list for a single interview.

The AI interviewer stores its scores under
``conversation_transcript.feedback.rating`` as ``{criterion: score}``.
Criteria vary between interviews and any level may be missing, so rating
extraction tolerates whatever shape it finds.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from app.core.config import settings
from app.core.constants import (
    CANDIDATE_DATE_FORMAT,
    RATING_NOT_AVAILABLE,
    RATING_SCALE,
    RESULT_INTERVIEW_COLUMN,
    UNNAMED_CANDIDATE,
)
from app.db.gateway import DataGateway
from app.models.candidate import CandidateResult, CandidateSummary

logger = logging.getLogger(__name__)


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _is_score(value: Any) -> bool:
    # bool is an int subclass but never a score
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def calculate_rating(candidate: CandidateResult | Mapping[str, Any] | None) -> str:
    """Average of the numeric feedback scores, e.g. ``"6/10"``.

    Non-numeric entries are ignored.  Returns ``"N/A"`` when there is no
    numeric score at all.
    """
    if isinstance(candidate, CandidateResult):
        transcript = candidate.conversation_transcript
    else:
        transcript = _dig(candidate, "conversation_transcript")

    rating = _dig(transcript, "feedback", "rating")
    if not isinstance(rating, Mapping):
        return RATING_NOT_AVAILABLE

    scores = [value for value in rating.values() if _is_score(value)]
    if not scores:
        return RATING_NOT_AVAILABLE

    try:
        average = math.floor(sum(scores) / len(scores) + 0.5)
    except OverflowError:
        return RATING_NOT_AVAILABLE
    return f"{average}/{RATING_SCALE}"


def summarize_candidate(candidate: CandidateResult) -> CandidateSummary:
    """Display fields for one candidate row."""
    name = candidate.fullname or UNNAMED_CANDIDATE
    initial = candidate.fullname[0].upper() if candidate.fullname else "?"
    completed_on = (
        candidate.created_at.strftime(CANDIDATE_DATE_FORMAT)
        if candidate.created_at
        else None
    )
    return CandidateSummary(
        fullname=name,
        initial=initial,
        completed_on=completed_on,
        rating=calculate_rating(candidate),
    )


async def list_candidates(gateway: DataGateway, interview_id: str) -> list[CandidateResult]:
    """Results recorded for ``interview_id``, newest first."""
    rows = await gateway.list_records(
        settings.RESULTS_TABLE,
        order_by="created_at",
        descending=True,
        filters={RESULT_INTERVIEW_COLUMN: interview_id},
    )
    logger.info(
        "candidates_listed",
        extra={"interview_id": interview_id, "count": len(rows)},
    )
    return [CandidateResult.model_validate(row) for row in rows]
