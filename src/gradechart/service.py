from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

from nonebot import logger

from gradechart.analyzer import summarize
from gradechart.bucketizer import build_buckets
from gradechart.config import HistogramConfig
from gradechart.eligibility import check_eligibility
from gradechart.models import (
    Assignment,
    Histogram,
    HistogramResult,
    NotApplicable,
    ScoreRecord,
)
from gradechart.partitioner import partition
from gradechart.plotter import ChartStyle, render_histogram_chart
from gradechart.precision import to_decimal
from gradechart.reducer import reduce_latest
from gradechart.repository import GradeRepository

ASSIGNMENT_NOT_FOUND = "assignment not found"


def compute_histogram(
    maximum: Decimal | int | float | str,
    records: Iterable[ScoreRecord],
    config: HistogramConfig | None = None,
) -> Histogram:
    """Reduce attempts to latest scores, partition ``[0, maximum]`` and count.

    Entities whose latest attempt is ungraded (negative score) are left out.
    A grade above the maximum, left behind when the maximum is lowered after
    grading, is counted in the terminal ``[maximum; maximum]`` bucket.
    """
    config = config or HistogramConfig()
    latest = reduce_latest(records)
    ranges = partition(maximum, config.bucket_count, config.decimal_precision)
    top = ranges[-1].upper_bound
    scores = [
        min(to_decimal(s.score, config.decimal_precision), top)
        for s in latest
        if s.score >= 0
    ]
    buckets = build_buckets(ranges, scores, config.decimal_precision)
    return Histogram(maximum=top, buckets=tuple(buckets))


@dataclass(slots=True)
class ChartResult:
    summary_text: str
    histogram: HistogramResult
    chart_image: Path | None


class GradeChartService:
    def __init__(
        self,
        repository: GradeRepository,
        config: HistogramConfig,
        chart_dir: Path,
        style: ChartStyle,
    ) -> None:
        self.repo = repository
        self.config = config
        self.chart_dir = chart_dir
        self.style = style

    async def _resolve(
        self, assignment_id: int, user_id: int, now: datetime | None
    ) -> tuple[Assignment | None, HistogramResult]:
        assignment = await self.repo.get_assignment(assignment_id)
        if assignment is None:
            return None, NotApplicable(ASSIGNMENT_NOT_FOUND)

        user_grade = await self.repo.get_user_grade(assignment_id, user_id)
        reason = check_eligibility(assignment, user_grade, now or datetime.now(UTC))
        if reason is not None:
            logger.info(
                "Chart for assignment {} hidden from user {}: {}",
                assignment_id,
                user_id,
                reason,
            )
            return assignment, NotApplicable(reason)

        assert assignment.max_grade is not None
        records = await self.repo.get_attempt_records(assignment_id)
        over = sum(1 for r in records if r.score > assignment.max_grade)
        if over:
            logger.warning(
                "Assignment {} has {} attempts above the max grade {}, counted in the top bucket",
                assignment_id,
                over,
                assignment.max_grade,
            )
        histogram = compute_histogram(assignment.max_grade, records, self.config)
        logger.debug(
            "Assignment {} histogram: {} graded students in {} ranges up to {}",
            assignment_id,
            histogram.total,
            len(histogram.buckets),
            histogram.maximum,
        )
        return assignment, histogram

    async def build_for_user(
        self, assignment_id: int, user_id: int, now: datetime | None = None
    ) -> HistogramResult:
        _, result = await self._resolve(assignment_id, user_id, now)
        return result

    async def run_once(
        self, assignment_id: int, user_id: int, now: datetime | None = None
    ) -> ChartResult:
        assignment, result = await self._resolve(assignment_id, user_id, now)
        title = assignment.name if assignment else f"Assignment {assignment_id}"
        summary = summarize(result, title)
        if isinstance(result, NotApplicable):
            return ChartResult(summary, result, None)

        stamp = (now or datetime.now(UTC)).strftime("%Y%m%d_%H%M%S")
        chart_path = render_histogram_chart(
            output_path=self.chart_dir / str(assignment_id) / f"grades_{stamp}.png",
            histogram=result,
            title=title,
            style=self.style,
        )
        return ChartResult(summary, result, chart_path)
