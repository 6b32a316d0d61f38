from __future__ import annotations

from gradechart.eligibility import NO_SUBMISSION, NOT_DUE_YET, NOT_POINT_GRADED
from gradechart.models import HistogramResult, NotApplicable

_REASON_TEXT = {
    NOT_DUE_YET: "The grades chart is shown once the due date has passed.",
    NO_SUBMISSION: "The grades chart is shown once you have a graded submission.",
    NOT_POINT_GRADED: "This assignment is not graded with points, so there is no chart.",
}


def _reason_text(result: NotApplicable) -> str:
    return _REASON_TEXT.get(result.reason, f"No grades chart available ({result.reason}).")


def summarize(result: HistogramResult, title: str) -> str:
    if isinstance(result, NotApplicable):
        return f"{title}: {_reason_text(result)}"

    lines = [
        f"=== Grades chart: {title} ===",
        f"Maximum grade: {result.maximum}",
        f"Graded students: {result.total}",
        "----------------------",
    ]
    if result.total == 0:
        lines.append("No graded submissions yet.")
        return "\n".join(lines)

    width = max(len(label) for label in result.labels)
    for bucket in result.buckets:
        lines.append(f"{bucket.range.label.ljust(width)} : {bucket.count}")
    return "\n".join(lines)
