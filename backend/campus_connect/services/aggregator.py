"""Percentage math and status rules for student attendance.

Everything here is a pure function over data the caller already fetched, so the
same rules back the student report endpoint and the tests.
"""
import math
from collections import OrderedDict
from typing import Iterable, List, Sequence

from campus_connect.models.attendance import (
    AttendanceRecord,
    AttendanceReport,
    MonthlyAttendance,
    RowId,
    StatusTier,
    Subject,
    SubjectAttendanceSummary,
)

# Minimum attendance a student must keep; below it the report warns.
ATTENDANCE_THRESHOLD = 75
# Lower edge of the yellow band on the visual scale.
CAUTION_THRESHOLD = 65

GREEN = "#4CAF50"
YELLOW = "#FFC107"
RED = "#F44336"

STATUS_MESSAGES = {
    StatusTier.GOOD: "Keep up the good work!",
    StatusTier.WARNING: f"Minimum {ATTENDANCE_THRESHOLD}% attendance required",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def compute_subject_summary(
    records: Sequence[AttendanceRecord], subject: Subject
) -> SubjectAttendanceSummary:
    """Summarise one subject's records for one student. Empty input gives 0%."""
    total_classes = len(records)
    present_classes = sum(1 for record in records if record.status == "present")
    percentage = (
        round_half_up(100 * present_classes / total_classes) if total_classes > 0 else 0
    )
    return SubjectAttendanceSummary(
        subject_id=subject.id,
        name=subject.name,
        total_classes=total_classes,
        present_classes=present_classes,
        percentage=percentage,
    )


def compute_overall_percentage(summaries: Iterable[SubjectAttendanceSummary]) -> int:
    """Unweighted mean of the subject percentages; every subject counts once."""
    percentages = [summary.percentage for summary in summaries]
    if not percentages:
        return 0
    return round_half_up(sum(percentages) / len(percentages))


def classify_status(percentage: int) -> StatusTier:
    """Pass/fail against the attendance policy line."""
    if percentage >= ATTENDANCE_THRESHOLD:
        return StatusTier.GOOD
    return StatusTier.WARNING


def status_color(percentage: int) -> str:
    """Three-band colour used to draw percentages. Independent of classify_status."""
    if percentage >= ATTENDANCE_THRESHOLD:
        return GREEN
    if percentage >= CAUTION_THRESHOLD:
        return YELLOW
    return RED


def status_message(tier: StatusTier) -> str:
    return STATUS_MESSAGES[tier]


def build_report(
    summaries: Sequence[SubjectAttendanceSummary],
    skipped: Iterable[RowId] = (),
) -> AttendanceReport:
    overall = compute_overall_percentage(summaries)
    tier = classify_status(overall)
    return AttendanceReport(
        overall_percentage=overall,
        status=tier,
        status_color=status_color(overall),
        status_message=status_message(tier),
        subject_summaries=list(summaries),
        skipped_subjects=list(skipped),
    )


def group_records_by_month(records: Iterable[AttendanceRecord]) -> List[MonthlyAttendance]:
    """Bucket records under "<Month> <Year>" labels, newest month and day first."""
    ordered = sorted(records, key=lambda record: record.date, reverse=True)
    buckets: "OrderedDict[str, List[AttendanceRecord]]" = OrderedDict()
    for record in ordered:
        label = record.date.strftime("%B %Y")
        buckets.setdefault(label, []).append(record)
    return [MonthlyAttendance(month=label, records=items) for label, items in buckets.items()]
