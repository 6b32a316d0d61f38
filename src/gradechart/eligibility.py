from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from gradechart.models import Assignment

NOT_DUE_YET = "not due yet"
NO_SUBMISSION = "no submission"
NOT_POINT_GRADED = "not point graded"


def check_eligibility(
    assignment: Assignment, user_grade: Decimal | None, now: datetime
) -> str | None:
    """Return why the chart must stay hidden for this viewer, or None to show it."""
    # Students can still submit until the due date.
    if assignment.due_date is not None and _as_utc(now) < _as_utc(assignment.due_date):
        return NOT_DUE_YET
    if user_grade is None or user_grade < 0:
        return NO_SUBMISSION
    # Scale and ungraded assignments carry no numeric maximum.
    if assignment.max_grade is None or assignment.max_grade < 0:
        return NOT_POINT_GRADED
    return None


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
