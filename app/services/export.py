"""CSV export of the visible user list and of an interview's candidates.

Rows go through the ``csv`` writer, so names or emails containing commas,
quotes or line breaks are quoted rather than shifting columns.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from app.core.constants import (
    CANDIDATE_CSV_HEADER,
    MISSING_VALUE,
    USER_CSV_DATE_FORMAT,
    USER_CSV_HEADER,
)
from app.models.candidate import CandidateSummary
from app.models.user import EnrichedUser
from app.services.users import get_status_label


def _write_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def user_csv_row(user: EnrichedUser) -> list[Any]:
    """Export columns for one user, in header order."""
    created = user.created_at.strftime(USER_CSV_DATE_FORMAT) if user.created_at else ""
    return [
        user.name or MISSING_VALUE,
        user.email or MISSING_VALUE,
        created,
        user.interview_count,
        user.candidate_count,
        user.credits or 0,
        get_status_label(user).value,
    ]


def users_to_csv(users: Iterable[EnrichedUser]) -> str:
    """Serialize ``users`` (already filtered and sorted) to CSV text."""
    return _write_csv(USER_CSV_HEADER, (user_csv_row(user) for user in users))


def export_filename(today: date | None = None) -> str:
    """Download name for the user export, e.g. ``users-2024-05-01.csv``."""
    today = today or date.today()
    return f"users-{today.isoformat()}.csv"


def candidates_to_csv(candidates: Iterable[CandidateSummary]) -> str:
    """Serialize a rendered candidate list to CSV text."""
    return _write_csv(
        CANDIDATE_CSV_HEADER,
        ([c.fullname, c.completed_on or "", c.rating] for c in candidates),
    )


def candidates_filename(interview_id: str, today: date | None = None) -> str:
    today = today or date.today()
    return f"candidates-{interview_id}-{today.isoformat()}.csv"
