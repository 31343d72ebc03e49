from __future__ import annotations

import asyncio
from datetime import date

import pytest

from campus_connect.exceptions import AttendanceFetchError
from campus_connect.models.attendance import AttendanceRecord, StudentRef, Subject


class FakeAttendanceSource:
    """In-memory stand-in for the Supabase tables used by the attendance service."""

    def __init__(self, *, students=None, subjects=None, records=None, failing_subjects=()):
        self.students = dict(students or {})  # email -> student id
        self.subjects = list(subjects or [])
        # (student_id, subject_id, date) -> status
        self.rows = {}
        for r in records or []:
            self.rows[(r.student_id, r.subject_id, r.date)] = r.status
        self.failing_subjects = set(failing_subjects)
        self.attendance_calls = []
        self.upserts = []

    async def find_student_by_email(self, email):
        student_id = self.students.get(email)
        if student_id is None:
            return None
        return StudentRef(id=student_id, email=email)

    async def list_subjects(self):
        return list(self.subjects)

    async def list_attendance(self, student_id, subject_id):
        self.attendance_calls.append((student_id, subject_id))
        await asyncio.sleep(0)
        if subject_id in self.failing_subjects:
            raise AttendanceFetchError(f"boom for {subject_id}", subject_id=str(subject_id))
        matching = [
            AttendanceRecord(student_id=s, subject_id=sub, date=d, status=status)
            for (s, sub, d), status in self.rows.items()
            if str(s) == str(student_id) and str(sub) == str(subject_id)
        ]
        return sorted(matching, key=lambda r: r.date, reverse=True)

    async def upsert_attendance(self, rows):
        self.upserts.append(list(rows))
        for row in rows:
            key = (row["student_id"], row["subject_id"], date.fromisoformat(row["date"]))
            self.rows[key] = row["status"]
        return len(rows)


def make_records(student_id, subject_id, statuses, *, start=date(2025, 3, 1)):
    """One record per status on consecutive days from `start`."""
    return [
        AttendanceRecord(
            student_id=student_id,
            subject_id=subject_id,
            date=date.fromordinal(start.toordinal() + i),
            status=status,
        )
        for i, status in enumerate(statuses)
    ]


@pytest.fixture
def two_subject_source():
    subjects = [Subject(id=1, name="Data Structures"), Subject(id=2, name="Networks")]
    records = make_records(7, 1, ["present", "present", "absent"]) + make_records(7, 2, ["present"])
    return FakeAttendanceSource(
        students={"asha@campus.edu": 7},
        subjects=subjects,
        records=records,
    )
