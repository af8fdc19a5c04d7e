"""User listing service for the admin dashboard.

Fetches every user, enriches each one with activity counts pulled from
the related tables, and provides the pure search / sort / filter and
summary helpers the list endpoints are built from.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from app.core.config import settings
from app.core.constants import (
    INTERVIEW_OWNER_COLUMN,
    MSG_FETCH_FAILED,
    RESULT_INTERVIEW_COLUMN,
)
from app.db.gateway import DataGateway
from app.models.enums import SortKey, SortOrder, UserStatus
from app.models.user import EnrichedUser, User, UserQuery, UserStats

logger = logging.getLogger(__name__)


class AggregationError(RuntimeError):
    """Raised when any lookup of an aggregation pass fails."""


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

async def _count_or_zero(
    gateway: DataGateway,
    table: str,
    field: str,
    value: Any,
) -> int:
    # An equality on a missing value would match unrelated rows
    if value is None or value == "":
        return 0
    count = await gateway.count(table, field, value)
    return count or 0


async def _enrich_user(gateway: DataGateway, user: User) -> EnrichedUser:
    interview_count, candidate_count = await asyncio.gather(
        _count_or_zero(gateway, settings.INTERVIEWS_TABLE, INTERVIEW_OWNER_COLUMN, user.email),
        _count_or_zero(gateway, settings.RESULTS_TABLE, RESULT_INTERVIEW_COLUMN, user.interview_id),
    )
    return EnrichedUser(
        **user.model_dump(),
        interview_count=interview_count,
        candidate_count=candidate_count,
    )


async def fetch_enriched_users(gateway: DataGateway) -> list[EnrichedUser]:
    """Return every user with fresh interview and candidate counts.

    Users come back newest first.  All count lookups run concurrently and
    the pass is all-or-nothing: the first failure aborts it with
    ``AggregationError`` and nothing partial is returned.
    """
    try:
        rows = await gateway.list_records(
            settings.USERS_TABLE, order_by="created_at", descending=True
        )
        users = [User.model_validate(row) for row in rows]
        enriched = await asyncio.gather(*(_enrich_user(gateway, user) for user in users))
    except Exception as exc:
        logger.error(
            "user_aggregation_failed",
            extra={
                "error_type": type(exc).__name__,
                "error_message": str(exc),
            },
        )
        raise AggregationError(MSG_FETCH_FAILED) from exc

    logger.info("user_aggregation_complete", extra={"user_count": len(enriched)})
    return list(enriched)


# ---------------------------------------------------------------------------
# Search / sort / filter
# ---------------------------------------------------------------------------

def _matches_search(user: EnrichedUser, term: str) -> bool:
    for value in (user.name, user.email):
        if value is not None and term in value.lower():
            return True
    return False


def sort_value(user: EnrichedUser, key: SortKey) -> Any:
    """Comparable value of ``user`` for ``key`` (``None`` when missing)."""
    value = getattr(user, key.value)
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def filter_and_sort_users(
    users: Iterable[EnrichedUser],
    query: UserQuery,
) -> list[EnrichedUser]:
    """Return the visible users for ``query`` in display order.

    A user is visible when its name or email contains the search term
    (case-insensitive) and it is either not banned or banned users are
    shown.  Users missing the sort field go last in ascending order;
    descending reverses the whole order.  Ties keep input order.
    """
    term = query.search.lower()
    visible = [
        user
        for user in users
        if _matches_search(user, term) and (query.show_banned or not user.banned)
    ]

    def _key(user: EnrichedUser) -> tuple[bool, Any]:
        value = sort_value(user, query.sort_by)
        return (value is None, value if value is not None else 0)

    visible.sort(key=_key, reverse=query.order is SortOrder.desc)
    return visible


# ---------------------------------------------------------------------------
# Status and summary
# ---------------------------------------------------------------------------

def get_status_label(user: EnrichedUser) -> UserStatus:
    """Derive the display status; checks run in fixed priority order."""
    if user.banned:
        return UserStatus.banned
    if user.interview_count > 0:
        return UserStatus.active
    if user.created_at:
        return UserStatus.registered
    return UserStatus.inactive


def compute_user_stats(users: Iterable[EnrichedUser]) -> UserStats:
    """Summary counts over the full (unfiltered) user collection."""
    stats = UserStats()
    for user in users:
        stats.total_users += 1
        if user.banned:
            stats.banned_users += 1
        elif user.interview_count > 0:
            stats.active_users += 1
        stats.total_interviews += user.interview_count
        stats.total_candidates += user.candidate_count
    return stats
