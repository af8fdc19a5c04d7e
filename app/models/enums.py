"""Enum types shared by the admin models and query parameters."""

from enum import Enum


class SortKey(str, Enum):
    """Fields the user list can be sorted on."""
    created_at = "created_at"
    name = "name"
    email = "email"
    interview_count = "interview_count"


class SortOrder(str, Enum):
    """Sort direction."""
    asc = "asc"
    desc = "desc"


class UserStatus(str, Enum):
    """Derived account status shown in the list and the export."""
    banned = "Banned"
    active = "Active"
    registered = "Registered"
    inactive = "Inactive"


class NotificationLevel(str, Enum):
    """Outcome of a user-facing action."""
    success = "success"
    error = "error"


class StepStatus(str, Enum):
    """Result of one step of a cascading delete."""
    ok = "ok"
    failed = "failed"
    skipped = "skipped"
