from __future__ import annotations

from datetime import date

from src.school_attendance.school_attendance.attendance.frequency import (
    FrequencySummary,
    format_percent,
    frequency_percent,
    statuses_by_date,
    summarize,
    summarize_class,
    summarize_records,
)
from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AttendanceStatus

P, F, J = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.JUSTIFIED

DAYS = [date(2024, 3, d) for d in (4, 11, 18, 25)]


def _marks(*columns):
    return {day: statuses for day, statuses in zip(DAYS, columns)}


def test_rounds_half_up():
    assert frequency_percent(7, 8) == 88
    assert frequency_percent(1, 8) == 13
    assert frequency_percent(1, 3) == 33
    assert frequency_percent(2, 3) == 67
    assert frequency_percent(1, 2) == 50


def test_no_data_is_not_zero():
    assert frequency_percent(0, 0) is None
    assert format_percent(None) == "--"
    assert format_percent(0) == "0%"


def test_unmarked_dates_are_excluded():
    marks = _marks({"s1": P}, {"s1": F}, {}, {"s2": P})

    summary = summarize(DAYS, marks, "s1")

    assert summary.total == 2
    assert summary.percent == 50


def test_justified_counts_as_presence():
    marks = _marks({"s1": J}, {"s1": P}, {"s1": F}, {"s1": J})

    summary = summarize(DAYS, marks, "s1")

    assert summary.presences == 3
    assert summary.justified == 2
    assert summary.absences == 1
    assert summary.percent == 75


def test_dates_without_a_record_are_ignored():
    summary = summarize(DAYS, {DAYS[0]: {"s1": P}}, "s1")

    assert summary == FrequencySummary(present=1)
    assert summary.percent == 100


def test_class_total_is_sum_of_students():
    marks = _marks({"s1": P, "s2": F}, {"s1": P, "s2": P})

    total = summarize_class(DAYS, marks, ["s1", "s2"])

    assert total.presences == 3
    assert total.absences == 1
    assert total.percent == 75


def test_summarize_records_counts_every_mark():
    records = [
        AttendanceRecord("r1", "c1", DAYS[0], {"s1": P, "s2": F}),
        AttendanceRecord("r2", "c2", DAYS[1], {"s1": J}),
    ]

    summary = summarize_records(records)

    assert summary.total == 3
    assert summary.percent == 67
    assert statuses_by_date(records)[DAYS[1]] == {"s1": J}


def test_summary_to_dict():
    assert FrequencySummary(present=1, absences=1).to_dict() == {
        "presences": 1,
        "present": 1,
        "justified": 0,
        "absences": 1,
        "total": 2,
        "percent": 50,
    }
