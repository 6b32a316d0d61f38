from __future__ import annotations

from collections.abc import Hashable, Iterable

from gradechart.models import LatestScore, ScoreRecord


def reduce_latest(records: Iterable[ScoreRecord]) -> list[LatestScore]:
    """Keep one score per entity: the one from its highest attempt number.

    When two records share the highest attempt number the one seen later
    wins. Entities come out in order of first appearance.
    """
    latest: dict[Hashable, ScoreRecord] = {}
    for record in records:
        current = latest.get(record.entity_id)
        if current is None or record.attempt_number >= current.attempt_number:
            latest[record.entity_id] = record

    return [LatestScore(entity_id=r.entity_id, score=r.score) for r in latest.values()]
