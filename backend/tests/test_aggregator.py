from datetime import date

import pytest

from campus_connect.models.attendance import StatusTier, Subject, SubjectAttendanceSummary
from campus_connect.services.aggregator import (
    build_report,
    classify_status,
    compute_overall_percentage,
    compute_subject_summary,
    group_records_by_month,
    round_half_up,
    status_color,
    status_message,
)
from conftest import make_records

DS = Subject(id=1, name="Data Structures")


def _summary(subject_id, percentage, total=10):
    return SubjectAttendanceSummary(
        subject_id=subject_id,
        name=f"S{subject_id}",
        total_classes=total,
        present_classes=round(total * percentage / 100),
        percentage=percentage,
    )


def test_empty_records_give_zero_not_an_error():
    summary = compute_subject_summary([], DS)

    assert summary.total_classes == 0
    assert summary.present_classes == 0
    assert summary.percentage == 0
    assert summary.subject_id == 1
    assert summary.name == "Data Structures"


def test_all_present_is_100_and_all_absent_is_0():
    assert compute_subject_summary(make_records(1, 1, ["present"] * 4), DS).percentage == 100
    assert compute_subject_summary(make_records(1, 1, ["absent"] * 4), DS).percentage == 0


def test_two_of_three_rounds_to_67():
    summary = compute_subject_summary(make_records(1, 1, ["present", "present", "absent"]), DS)

    assert summary.total_classes == 3
    assert summary.present_classes == 2
    assert summary.percentage == 67


def test_half_rounds_up():
    # 1 of 8 present is 12.5%
    summary = compute_subject_summary(make_records(1, 1, ["present"] + ["absent"] * 7), DS)
    assert summary.percentage == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3


def test_overall_of_nothing_is_zero():
    assert compute_overall_percentage([]) == 0


def test_overall_is_unweighted_mean():
    summaries = [_summary(1, 100, total=1), _summary(2, 0, total=100)]
    assert compute_overall_percentage(summaries) == 50


def test_overall_rounds_half_up():
    assert compute_overall_percentage([_summary(1, 67), _summary(2, 100)]) == 84


@pytest.mark.parametrize(
    "percentage, tier",
    [(100, StatusTier.GOOD), (75, StatusTier.GOOD), (74, StatusTier.WARNING), (0, StatusTier.WARNING)],
)
def test_classify_status_uses_single_threshold(percentage, tier):
    assert classify_status(percentage) == tier


@pytest.mark.parametrize(
    "percentage, color",
    [(75, "#4CAF50"), (74, "#FFC107"), (65, "#FFC107"), (64, "#F44336"), (0, "#F44336")],
)
def test_status_color_has_three_bands(percentage, color):
    assert status_color(percentage) == color


def test_yellow_band_still_classifies_as_warning():
    assert status_color(70) == "#FFC107"
    assert classify_status(70) == StatusTier.WARNING


def test_status_messages():
    assert status_message(StatusTier.GOOD) == "Keep up the good work!"
    assert status_message(StatusTier.WARNING) == "Minimum 75% attendance required"


def test_build_report_for_no_subjects():
    report = build_report([])

    assert report.overall_percentage == 0
    assert report.status == StatusTier.WARNING
    assert report.status_color == "#F44336"
    assert report.subject_summaries == []
    assert report.skipped_subjects == []


def test_report_serialises_with_client_field_names():
    report = build_report([_summary(1, 80)])
    payload = report.model_dump(by_alias=True, mode="json")

    assert payload["overallPercentage"] == 80
    assert payload["status"] == "Good"
    assert payload["subjectSummaries"][0]["totalClasses"] == 10
    assert payload["subjectSummaries"][0]["subjectId"] == 1


def test_group_records_by_month_newest_first():
    records = make_records(1, 1, ["present", "absent"], start=date(2025, 1, 31)) + make_records(
        1, 1, ["present"], start=date(2025, 3, 3)
    )

    groups = group_records_by_month(records)

    assert [g.month for g in groups] == ["March 2025", "February 2025", "January 2025"]
    assert groups[2].records[0].date == date(2025, 1, 31)


def test_group_records_orders_days_descending_within_month():
    records = make_records(1, 1, ["present", "absent", "present"], start=date(2025, 4, 1))

    (april,) = group_records_by_month(records)

    assert [r.date.day for r in april.records] == [3, 2, 1]


def test_group_records_by_month_empty():
    assert group_records_by_month([]) == []
