"""Models describing the outcome of user-facing actions."""

from pydantic import BaseModel

from app.models.enums import NotificationLevel, StepStatus
from app.models.user import UserListResponse


class Notification(BaseModel):
    """A fire-and-forget message about one action."""
    level: NotificationLevel
    message: str


class DeleteStep(BaseModel):
    """One step of a cascading delete and how it went."""
    name: str
    table: str
    status: StepStatus
    error: str | None = None


class ActionResponse(BaseModel):
    """Response for ban / unban / delete endpoints.

    ``users`` holds the re-aggregated list when the action succeeded and
    the refresh that follows it did too.
    """
    success: bool
    message: str
    steps: list[DeleteStep] = []
    users: UserListResponse | None = None
