"""Pydantic models for the ``interview_results`` table and candidate list.

The feedback rating sits deep inside ``conversation_transcript``; its
shape is not enforced, so the transcript is kept as raw JSON.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class CandidateResult(BaseModel):
    """A completed interview result row."""
    model_config = ConfigDict(extra="ignore")

    id: Any = None
    fullname: str | None = None
    created_at: datetime | None = None
    conversation_transcript: Any = None


class CandidateSummary(BaseModel):
    """One rendered line of the candidate list."""
    fullname: str
    initial: str
    completed_on: str | None = None
    rating: str


class CandidateListResponse(BaseModel):
    """Full response for GET /api/v1/interviews/{interview_id}/candidates."""
    interview_id: str
    total: int = 0
    candidates: list[CandidateSummary] = []
