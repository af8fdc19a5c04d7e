"""Admin user-management session.

``UserDirectory`` ties the user services together the way the admin
screen uses them: it keeps the last successfully aggregated users, the
current query, a loading flag and the notifications raised by each
action.  After a successful moderation action it re-aggregates.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from app.core.config import settings
from app.core.constants import MSG_EXPORTED
from app.db.gateway import DataGateway
from app.models.enums import NotificationLevel
from app.models.moderation import ActionResponse, Notification
from app.models.user import EnrichedUser, User, UserListResponse, UserQuery, UserStats
from app.services.export import export_filename, users_to_csv
from app.services.moderation import delete_user_cascade, set_user_banned
from app.services.users import (
    AggregationError,
    compute_user_stats,
    fetch_enriched_users,
    filter_and_sort_users,
)

logger = logging.getLogger(__name__)


class UserDirectory:
    """Stateful view over the user list for one admin session."""

    def __init__(self, gateway: DataGateway, query: UserQuery | None = None) -> None:
        self.gateway = gateway
        self.query = query or UserQuery()
        self.users: list[EnrichedUser] = []
        self.loaded = False
        self.loading = False
        self.notifications: list[Notification] = []

    # -- derived state -----------------------------------------------------

    @property
    def visible(self) -> list[EnrichedUser]:
        """Users matching the current query, in display order."""
        return filter_and_sort_users(self.users, self.query)

    @property
    def stats(self) -> UserStats:
        return compute_user_stats(self.users)

    def snapshot(self) -> UserListResponse:
        visible = self.visible
        return UserListResponse(users=visible, total=len(visible), stats=self.stats)

    def update_query(self, **changes: Any) -> UserQuery:
        """Replace fields of the current query, validating the result."""
        self.query = UserQuery.model_validate({**self.query.model_dump(), **changes})
        return self.query

    def find_user(self, user_id: Any) -> EnrichedUser | None:
        for user in self.users:
            if str(user.id) == str(user_id):
                return user
        return None

    # -- notifications -----------------------------------------------------

    def notify(self, level: NotificationLevel, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))
        logger.info("notification", extra={"level": level.value, "notice": message})

    def _report(self, result: ActionResponse) -> None:
        level = NotificationLevel.success if result.success else NotificationLevel.error
        self.notify(level, result.message)

    # -- actions -----------------------------------------------------------

    async def refresh(self) -> bool:
        """Re-run aggregation.  On failure the previous users are kept."""
        self.loading = True
        try:
            users = await fetch_enriched_users(self.gateway)
        except AggregationError as exc:
            self.notify(NotificationLevel.error, str(exc))
            return False
        finally:
            self.loading = False
        self.users = users
        self.loaded = True
        return True

    async def _set_banned(self, user_id: Any, banned: bool) -> ActionResponse:
        result = await set_user_banned(self.gateway, user_id, banned)
        self._report(result)
        if result.success:
            await self.refresh()
        return result

    async def ban_user(self, user_id: Any) -> ActionResponse:
        return await self._set_banned(user_id, True)

    async def unban_user(self, user_id: Any) -> ActionResponse:
        return await self._set_banned(user_id, False)

    async def _resolve_user(self, user_id: Any) -> tuple[User, str | None]:
        """The user to delete and the lookup error, if the lookup failed."""
        user = self.find_user(user_id)
        if user is not None:
            return user, None
        try:
            row = await self.gateway.get_record(settings.USERS_TABLE, user_id)
        except Exception as exc:
            logger.warning(
                "user_lookup_failed",
                extra={"user_id": str(user_id), "error_message": str(exc)},
            )
            return User(id=user_id), str(exc)
        # Unknown users still get the final delete attempted by id
        return (User.model_validate(row) if row else User(id=user_id)), None

    async def delete_user(self, user_id: Any) -> ActionResponse:
        user, lookup_error = await self._resolve_user(user_id)
        result = await delete_user_cascade(self.gateway, user, lookup_error)
        self._report(result)
        if result.success:
            await self.refresh()
        return result

    def export(self, today: date | None = None) -> tuple[str, str]:
        """``(filename, csv_text)`` for the currently visible users."""
        content = users_to_csv(self.visible)
        self.notify(NotificationLevel.success, MSG_EXPORTED)
        return export_filename(today), content
