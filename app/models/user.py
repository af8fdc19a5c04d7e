"""Pydantic models for the ``users`` table and the admin user list.

``EnrichedUser`` carries the activity counts computed at aggregation
time; they are never written back to the database.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import SortKey, SortOrder


class User(BaseModel):
    """A user row as returned by Supabase."""
    model_config = ConfigDict(extra="ignore")

    id: Any
    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    credits: int = 0
    banned: bool = False
    interview_id: Any = None

    @field_validator("credits", mode="before")
    @classmethod
    def _null_credits(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("banned", mode="before")
    @classmethod
    def _null_banned(cls, value: Any) -> Any:
        return False if value is None else value


class EnrichedUser(User):
    """User plus derived, non-persisted activity counts."""
    interview_count: int = Field(default=0, ge=0)
    candidate_count: int = Field(default=0, ge=0)


class UserQuery(BaseModel):
    """Search / sort / filter state for the user list."""
    search: str = ""
    sort_by: SortKey = SortKey.created_at
    order: SortOrder = SortOrder.desc
    show_banned: bool = True


class UserStats(BaseModel):
    """Summary cards computed over every user, filtered or not."""
    total_users: int = 0
    active_users: int = 0
    banned_users: int = 0
    total_interviews: int = 0
    total_candidates: int = 0


class UserListResponse(BaseModel):
    """Full response for GET /api/v1/admin/users."""
    users: list[EnrichedUser] = []
    total: int = 0
    stats: UserStats = UserStats()
