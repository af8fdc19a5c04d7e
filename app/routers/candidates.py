"""Candidate list endpoints for a single interview."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import Response

from app.db.gateway import DataGateway, get_gateway
from app.models.candidate import CandidateListResponse, CandidateSummary
from app.services.candidates import list_candidates, summarize_candidate
from app.services.export import candidates_filename, candidates_to_csv

logger = logging.getLogger(__name__)

router = APIRouter()


async def _summaries(gateway: DataGateway, interview_id: str) -> list[CandidateSummary]:
    try:
        results = await list_candidates(gateway, interview_id)
    except Exception as exc:
        logger.error(
            "list_candidates_failed",
            extra={"interview_id": interview_id, "error_message": str(exc)},
        )
        raise HTTPException(status_code=502, detail="Failed to fetch candidates") from exc
    return [summarize_candidate(result) for result in results]


@router.get("/{interview_id}/candidates", response_model=CandidateListResponse)
async def get_candidates(
    interview_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> CandidateListResponse:
    """Return the interview's candidates with their average rating."""
    candidates = await _summaries(gateway, interview_id)
    return CandidateListResponse(
        interview_id=interview_id,
        total=len(candidates),
        candidates=candidates,
    )


@router.get("/{interview_id}/candidates/export")
async def export_candidates(
    interview_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> Response:
    """Download the interview's candidate list as CSV."""
    candidates = await _summaries(gateway, interview_id)
    return Response(
        content=candidates_to_csv(candidates).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{candidates_filename(interview_id)}"'
        },
    )
