from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import aiosqlite

from gradechart.models import UNGRADED, Assignment, ScoreRecord


def _to_timestamp(due_date: datetime | None) -> int:
    if due_date is None:
        return 0
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=UTC)
    return int(due_date.timestamp())


def _from_timestamp(value: int) -> datetime | None:
    # 0 means the assignment has no due date.
    if not value:
        return None
    return datetime.fromtimestamp(value, UTC)


def _grade_or_ungraded(value: str | None) -> Decimal:
    return UNGRADED if value is None else Decimal(value)


class GradeRepository:
    """Read side of the grade store, plus the inserts used to seed it.

    Grades are kept as TEXT so they come back as exact decimals.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path

    async def init(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self._db_path) as db:
            await db.executescript(
                """
                CREATE TABLE IF NOT EXISTS assignments (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    max_grade TEXT,
                    due_date INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS assign_grades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    assignment INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    attempt_number INTEGER NOT NULL,
                    grade TEXT,
                    FOREIGN KEY (assignment) REFERENCES assignments(id)
                );

                CREATE INDEX IF NOT EXISTS idx_grades_assignment_user
                ON assign_grades(assignment, user_id);
                """
            )
            await db.commit()

    async def add_assignment(
        self,
        name: str,
        max_grade: Decimal | None,
        due_date: datetime | None = None,
    ) -> Assignment:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "INSERT INTO assignments (name, max_grade, due_date) VALUES (?, ?, ?)",
                (
                    name,
                    None if max_grade is None else str(max_grade),
                    _to_timestamp(due_date),
                ),
            )
            assignment_id = cursor.lastrowid
            assert assignment_id is not None
            await db.commit()

        return Assignment(
            id=int(assignment_id),
            name=name,
            max_grade=max_grade,
            due_date=_from_timestamp(_to_timestamp(due_date)),
        )

    async def add_attempt(
        self,
        assignment_id: int,
        user_id: int,
        attempt_number: int,
        grade: Decimal | None,
    ) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                """
                INSERT INTO assign_grades (assignment, user_id, attempt_number, grade)
                VALUES (?, ?, ?, ?)
                """,
                (assignment_id, user_id, attempt_number, None if grade is None else str(grade)),
            )
            await db.commit()

    async def get_assignment(self, assignment_id: int) -> Assignment | None:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "SELECT id, name, max_grade, due_date FROM assignments WHERE id = ?",
                (assignment_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return Assignment(
            id=int(row[0]),
            name=str(row[1]),
            max_grade=None if row[2] is None else Decimal(row[2]),
            due_date=_from_timestamp(int(row[3])),
        )

    async def get_attempt_records(self, assignment_id: int) -> list[ScoreRecord]:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                """
                SELECT user_id, attempt_number, grade
                FROM assign_grades
                WHERE assignment = ?
                ORDER BY id ASC
                """,
                (assignment_id,),
            )
            rows = await cursor.fetchall()

        return [
            ScoreRecord(
                entity_id=int(user_id),
                attempt_number=int(attempt),
                score=_grade_or_ungraded(grade),
            )
            for user_id, attempt, grade in rows
        ]

    async def get_user_grade(self, assignment_id: int, user_id: int) -> Decimal | None:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                """
                SELECT grade
                FROM assign_grades
                WHERE assignment = ? AND user_id = ?
                ORDER BY attempt_number DESC, id DESC
                LIMIT 1
                """,
                (assignment_id, user_id),
            )
            row = await cursor.fetchone()
            return _grade_or_ungraded(row[0]) if row else None
