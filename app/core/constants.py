"""Application constants.

Correlation columns, user-facing messages and export layouts.
"""

# ---------------------------------------------------------------------------
# Correlation columns between users and related tables
# ---------------------------------------------------------------------------

# Interviews are owned by the author's email, not by user id
INTERVIEW_OWNER_COLUMN: str = "userEmail"
RESULT_INTERVIEW_COLUMN: str = "interview_id"

# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
MSG_FETCH_FAILED: str = "Failed to fetch users"
MSG_BANNED: str = "User banned successfully"
MSG_UNBANNED: str = "User unbanned successfully"
MSG_BAN_FAILED: str = "Failed to update user status"
MSG_DELETED: str = "User deleted successfully"
MSG_DELETE_FAILED: str = "Failed to delete user"
MSG_EXPORTED: str = "Users exported successfully"

# ---------------------------------------------------------------------------
# User export
# ---------------------------------------------------------------------------
USER_CSV_HEADER: list[str] = [
    "Name",
    "Email",
    "Created Date",
    "Interviews Created",
    "Candidates Interviewed",
    "Credits",
    "Status",
]
USER_CSV_DATE_FORMAT: str = "%Y-%m-%d %H:%M"
MISSING_VALUE: str = "N/A"

# ---------------------------------------------------------------------------
# Candidate list
# ---------------------------------------------------------------------------
CANDIDATE_CSV_HEADER: list[str] = ["Name", "Completed On", "Rating"]
CANDIDATE_DATE_FORMAT: str = "%b %d, %Y"
UNNAMED_CANDIDATE: str = "Unnamed Candidate"
RATING_NOT_AVAILABLE: str = "N/A"
RATING_SCALE: int = 10
