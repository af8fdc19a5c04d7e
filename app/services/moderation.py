"""Account moderation actions: ban / unban and cascading delete.

Actions never raise on backend failure.  They log the cause and return an
``ActionResponse`` whose message is suitable for showing to the admin.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.config import settings
from app.core.constants import (
    INTERVIEW_OWNER_COLUMN,
    MSG_BAN_FAILED,
    MSG_BANNED,
    MSG_DELETE_FAILED,
    MSG_DELETED,
    MSG_UNBANNED,
    RESULT_INTERVIEW_COLUMN,
)
from app.db.gateway import DataGateway
from app.models.enums import StepStatus
from app.models.moderation import ActionResponse, DeleteStep
from app.models.user import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Ban / unban
# ---------------------------------------------------------------------------

async def set_user_banned(
    gateway: DataGateway,
    user_id: Any,
    banned: bool,
) -> ActionResponse:
    """Set the ``banned`` flag of one user.

    Writing the value the user already has is harmless.
    """
    try:
        await gateway.update(settings.USERS_TABLE, user_id, {"banned": banned})
    except Exception as exc:
        logger.error(
            "user_ban_update_failed",
            extra={
                "user_id": str(user_id),
                "banned": banned,
                "error_message": str(exc),
            },
        )
        return ActionResponse(success=False, message=MSG_BAN_FAILED)

    logger.info("user_ban_updated", extra={"user_id": str(user_id), "banned": banned})
    return ActionResponse(success=True, message=MSG_BANNED if banned else MSG_UNBANNED)


# ---------------------------------------------------------------------------
# Cascading delete
# ---------------------------------------------------------------------------

def _delete_plan(user: User) -> list[tuple[str, str, str, Any, bool]]:
    """Ordered ``(name, table, field, value, required)`` steps for ``user``.

    Only the final step, removing the user row itself, decides the outcome.
    """
    return [
        ("interviews", settings.INTERVIEWS_TABLE, INTERVIEW_OWNER_COLUMN, user.email, False),
        ("interview_results", settings.RESULTS_TABLE, RESULT_INTERVIEW_COLUMN, user.interview_id, False),
        ("user", settings.USERS_TABLE, "id", user.id, True),
    ]


def _log_step_failure(user: User, name: str, table: str, error: str) -> None:
    logger.error(
        "user_delete_step_failed",
        extra={
            "user_id": str(user.id),
            "step": name,
            "table": table,
            "error_message": error,
        },
    )


async def delete_user_cascade(
    gateway: DataGateway,
    user: User,
    lookup_error: str | None = None,
) -> ActionResponse:
    """Delete a user's interviews, their results, then the user row.

    Dependent deletes are best effort: a failure is logged and recorded in
    the returned steps but does not stop the user row from being deleted.
    The dependent rows are not restored if the final delete fails, so a
    partial cleanup is possible; the steps report exactly what happened.

    ``lookup_error`` is set when the user row could not be read.  Dependent
    steps whose value is then unknown are recorded as failed with that
    error instead of skipped.
    """
    steps: list[DeleteStep] = []
    success = False

    for name, table, field, value, required in _delete_plan(user):
        if value is None or value == "":
            if lookup_error is not None and not required:
                _log_step_failure(user, name, table, lookup_error)
                steps.append(
                    DeleteStep(
                        name=name, table=table, status=StepStatus.failed, error=lookup_error
                    )
                )
            else:
                steps.append(DeleteStep(name=name, table=table, status=StepStatus.skipped))
            continue
        try:
            await gateway.delete(table, field, value)
        except Exception as exc:
            _log_step_failure(user, name, table, str(exc))
            steps.append(
                DeleteStep(name=name, table=table, status=StepStatus.failed, error=str(exc))
            )
            continue
        steps.append(DeleteStep(name=name, table=table, status=StepStatus.ok))
        if required:
            success = True

    if not success:
        return ActionResponse(success=False, message=MSG_DELETE_FAILED, steps=steps)

    logger.info(
        "user_deleted",
        extra={
            "user_id": str(user.id),
            "failed_steps": [s.name for s in steps if s.status is StepStatus.failed],
        },
    )
    return ActionResponse(success=True, message=MSG_DELETED, steps=steps)
