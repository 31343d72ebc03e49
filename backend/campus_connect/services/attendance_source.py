import logging
from typing import Dict, List, Optional, Protocol, Sequence

import httpx
import pydantic
from postgrest import APIError
from supabase import AsyncClient

from campus_connect.exceptions import AttendanceFetchError, DataServiceError
from campus_connect.models.attendance import AttendanceRecord, RowId, StudentRef, Subject

logger = logging.getLogger(__name__)

ATTENDANCE_CONFLICT_KEY = "student_id, subject_id, date"


class AttendanceSource(Protocol):
    """Read/write operations the attendance service needs from the data service."""

    async def find_student_by_email(self, email: str) -> Optional[StudentRef]:
        raise NotImplementedError

    async def list_subjects(self) -> List[Subject]:
        raise NotImplementedError

    async def list_attendance(self, student_id: RowId, subject_id: RowId) -> List[AttendanceRecord]:
        """Records for one student in one subject, newest date first."""
        raise NotImplementedError

    async def upsert_attendance(self, rows: Sequence[Dict]) -> int:
        raise NotImplementedError


class SupabaseAttendanceSource:
    """AttendanceSource backed by the project's `student`, `subjects` and `attendance` tables."""

    def __init__(self, db: AsyncClient):
        self.db = db

    async def find_student_by_email(self, email: str) -> Optional[StudentRef]:
        try:
            response = await (
                self.db.table("student")
                .select("id, email")
                .eq("email", email)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise AttendanceFetchError(f"Student lookup failed: {e}") from e

        if not response.data:
            return None
        return StudentRef(**response.data[0])

    async def list_subjects(self) -> List[Subject]:
        try:
            response = await self.db.table("subjects").select("id, name").execute()
        except (APIError, httpx.HTTPError) as e:
            raise AttendanceFetchError(f"Subject catalog fetch failed: {e}") from e
        return [Subject(**row) for row in response.data or []]

    async def list_attendance(self, student_id: RowId, subject_id: RowId) -> List[AttendanceRecord]:
        try:
            response = await (
                self.db.table("attendance")
                .select("id, student_id, subject_id, date, status")
                .eq("student_id", student_id)
                .eq("subject_id", subject_id)
                .order("date", desc=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise AttendanceFetchError(
                f"Attendance fetch failed for subject {subject_id}: {e}",
                subject_id=str(subject_id),
            ) from e
        try:
            return [AttendanceRecord(**row) for row in response.data or []]
        except pydantic.ValidationError as e:
            raise AttendanceFetchError(
                f"Malformed attendance row for subject {subject_id}: {e}",
                subject_id=str(subject_id),
            ) from e

    async def upsert_attendance(self, rows: Sequence[Dict]) -> int:
        try:
            response = await (
                self.db.table("attendance")
                .upsert(list(rows), on_conflict=ATTENDANCE_CONFLICT_KEY)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise DataServiceError(f"Failed to save attendance records: {e}") from e
        written = len(response.data or [])
        logger.info("Upserted attendance rows", extra={"rows": written})
        return written
