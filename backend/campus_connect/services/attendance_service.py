import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence

from campus_connect.exceptions import AttendanceFetchError, ValidationError
from campus_connect.models.attendance import (
    AttendanceMark,
    AttendanceRecord,
    AttendanceReport,
    MonthlyAttendance,
    RowId,
    Subject,
    SubjectAttendanceSummary,
)
from campus_connect.services.aggregator import (
    build_report,
    compute_subject_summary,
    group_records_by_month,
)
from campus_connect.services.attendance_source import AttendanceSource

logger = logging.getLogger(__name__)


class FetchErrorPolicy(str, Enum):
    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True)
class SubjectFetch:
    """Outcome of one subject's attendance fetch: records on success, error otherwise."""

    subject: Subject
    records: Optional[List[AttendanceRecord]] = None
    error: Optional[AttendanceFetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AttendanceService:
    def __init__(
        self,
        source: AttendanceSource,
        *,
        on_fetch_error: FetchErrorPolicy = FetchErrorPolicy.FAIL,
    ):
        self.source = source
        self.on_fetch_error = FetchErrorPolicy(on_fetch_error)

    async def fetch_and_aggregate(self, student_email: str) -> AttendanceReport:
        """
        Builds the attendance report for the student signed in as `student_email`.
        1. Resolves the student row from the email.
        2. Fetches the subject catalog.
        3. Fetches every subject's records concurrently and joins them.
        4. Reduces the results into per-subject summaries and the overall figure.
        """
        student = await self.source.find_student_by_email(student_email)
        if student is None:
            logger.info("No student row for email; returning empty report", extra={"email": student_email})
            return build_report([])

        subjects = await self.source.list_subjects()

        tasks = [
            asyncio.create_task(self._fetch_subject(student.id, subject))
            for subject in subjects
        ]
        try:
            fetches = await asyncio.gather(*tasks)
        finally:
            # No fetch outlives the report, whether it failed or was cancelled.
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        summaries: List[SubjectAttendanceSummary] = []
        skipped: List[RowId] = []
        for fetch in fetches:
            if fetch.ok:
                summaries.append(compute_subject_summary(fetch.records, fetch.subject))
                continue

            if self.on_fetch_error is FetchErrorPolicy.FAIL:
                raise fetch.error
            logger.warning(
                "Skipping subject after failed attendance fetch",
                extra={"subject_id": fetch.subject.id, "error": str(fetch.error)},
            )
            skipped.append(fetch.subject.id)

        return build_report(summaries, skipped)

    async def _fetch_subject(self, student_id: RowId, subject: Subject) -> SubjectFetch:
        try:
            records = await self.source.list_attendance(student_id, subject.id)
        except AttendanceFetchError as e:
            return SubjectFetch(subject=subject, error=e)
        return SubjectFetch(subject=subject, records=list(records))

    async def list_subjects(self) -> List[Subject]:
        return await self.source.list_subjects()

    async def subject_records(self, student_email: str, subject_id: RowId) -> List[MonthlyAttendance]:
        """One subject's records for the student, grouped into month blocks."""
        student = await self.source.find_student_by_email(student_email)
        if student is None:
            return []
        records = await self.source.list_attendance(student.id, subject_id)
        return group_records_by_month(records)

    async def mark_attendance(
        self,
        subject_id: RowId,
        class_date: date,
        marks: Sequence[AttendanceMark],
    ) -> int:
        """Upserts one row per student for the class; re-marking replaces the status."""
        if not marks:
            raise ValidationError("At least one attendance mark is required.")

        # Last mark wins when the same student appears twice in one request;
        # 7 and "7" are the same row to the database.
        rows_by_student = {}
        for mark in marks:
            rows_by_student[str(mark.student_id)] = {
                "student_id": mark.student_id,
                "subject_id": subject_id,
                "date": class_date.isoformat(),
                "status": mark.status,
            }

        written = await self.source.upsert_attendance(list(rows_by_student.values()))
        logger.info(
            "Attendance marked",
            extra={"subject_id": subject_id, "date": class_date.isoformat(), "rows": written},
        )
        return written
