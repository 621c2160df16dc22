from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from datetime import date

import pandas as pd
from openpyxl.utils import get_column_letter

from ..attendance.frequency import FrequencySummary, format_percent, statuses_by_date, summarize
from ..attendance.model import AttendanceRecord
from ..classes.model import SchoolClass
from ..common.datetime_utils import format_day_month
from ..core.constants import APPROVAL_THRESHOLD_PERCENT
from ..core.enums import StudentStatus
from ..core.exceptions import NotFoundError
from ..roster.resolver import resolve_roster
from ..state.store import StateStore
from ..students.model import Student

SHEET_NAME = "Frequência"


@dataclass(frozen=True)
class StudentSummary:
    student: Student
    summary: FrequencySummary

    def to_dict(self) -> dict:
        return {
            "student_id": self.student.student_id,
            "name": self.student.name,
            "status": self.student.status.value,
            **self.summary.to_dict(),
        }


@dataclass(frozen=True)
class ClassSheet:
    """Spreadsheet view of a class: recorded dates as columns."""

    school_class: SchoolClass
    dates: list[date]
    rows: list[tuple[Student, list[str], FrequencySummary]] = field(default_factory=list)

    @property
    def header(self) -> list[str]:
        return ["Aluno", *(format_day_month(d) for d in self.dates), "Faltas", "Presenças", "% Frequência"]

    def as_rows(self) -> list[list]:
        return [
            [student.name, *cells, summary.absences, summary.presences, format_percent(summary.percent)]
            for student, cells, summary in self.rows
        ]

    def to_dict(self) -> dict:
        return {
            "class": self.school_class.to_dict(),
            "dates": [d.isoformat() for d in self.dates],
            "header": self.header,
            "rows": self.as_rows(),
        }


@dataclass(frozen=True)
class StudentClassReport:
    school_class: SchoolClass
    summary: FrequencySummary
    history: list[tuple[date, str]]

    @property
    def approved(self) -> bool:
        percent = self.summary.percent
        return percent is not None and percent >= APPROVAL_THRESHOLD_PERCENT

    def to_dict(self) -> dict:
        return {
            "class": self.school_class.to_dict(),
            "summary": self.summary.to_dict(),
            "approved": self.approved,
            "history": [{"date": d.isoformat(), "status": s} for d, s in self.history],
        }


@dataclass(frozen=True)
class ReportGroup:
    year: int
    semester: str
    classes: list[SchoolClass]

    def to_dict(self) -> dict:
        return {"year": self.year, "semester": self.semester, "classes": [c.to_dict() for c in self.classes]}


def _first_day_order(school_class: SchoolClass) -> int:
    return school_class.days[0].order if school_class.days else 99


def export_filename(school_class: SchoolClass) -> str:
    name = re.sub(r"\s+", "_", school_class.course_name.strip())
    return f"Frequencia_{name}_{school_class.year}.xlsx"


class ReportService:
    """Read-only views over the current state snapshot."""

    def __init__(self, store: StateStore):
        self._store = store

    def _class(self, class_id: str) -> SchoolClass:
        school_class = self._store.state.school_class(class_id)
        if not school_class:
            raise NotFoundError("Turma não encontrada")
        return school_class

    def _class_data(self, class_id: str) -> tuple[SchoolClass, list[Student], list[AttendanceRecord]]:
        state = self._store.state
        school_class = self._class(class_id)
        return school_class, resolve_roster(school_class, state.students), state.records_for_class(class_id)

    def class_summary(self, class_id: str) -> list[StudentSummary]:
        """Per-student stats over every record of the class."""
        _, roster, records = self._class_data(class_id)
        marks = statuses_by_date(records)
        days = [r.date for r in records]
        return [StudentSummary(student=s, summary=summarize(days, marks, s.student_id)) for s in roster]

    def class_sheet(self, class_id: str) -> ClassSheet:
        school_class, roster, records = self._class_data(class_id)
        marks = statuses_by_date(records)
        days = [r.date for r in records]

        rows = []
        for student in roster:
            cells = []
            for d in days:
                status = marks[d].get(student.student_id)
                cells.append(status.code if status else "")
            rows.append((student, cells, summarize(days, marks, student.student_id)))
        return ClassSheet(school_class=school_class, dates=days, rows=rows)

    def student_report(self, student_id: str) -> list[StudentClassReport]:
        """Every class the student was in or has a mark in, newest term first."""
        state = self._store.state
        student = state.student(student_id)
        if not student:
            raise NotFoundError("Aluno não encontrado")

        marked_classes = {r.class_id for r in state.records if r.status_of(student_id) is not None}
        classes = [
            c for c in state.classes if c.class_id in student.enrolled_class_ids or c.class_id in marked_classes
        ]
        classes.sort(key=lambda c: (c.year, c.semester), reverse=True)

        reports = []
        for school_class in classes:
            records = state.records_for_class(school_class.class_id)
            marks = statuses_by_date(records)
            summary = summarize([r.date for r in records], marks, student_id)
            history = [
                (r.date, r.statuses[student_id].value)
                for r in sorted(records, key=lambda r: r.date, reverse=True)
                if r.status_of(student_id) is not None
            ]
            reports.append(StudentClassReport(school_class=school_class, summary=summary, history=history))
        return reports

    def report_groups(self) -> list[ReportGroup]:
        """Classes with at least one active or completed student, grouped by term."""
        state = self._store.state
        reportable = (StudentStatus.ACTIVE, StudentStatus.COMPLETED)

        groups: dict[tuple[int, str], list[SchoolClass]] = {}
        for school_class in state.classes:
            roster = resolve_roster(school_class, state.students)
            if any(s.status in reportable for s in roster):
                groups.setdefault((school_class.year, school_class.semester), []).append(school_class)

        out = []
        for (year, semester) in sorted(groups, reverse=True):
            items = sorted(groups[(year, semester)], key=lambda c: (_first_day_order(c), c.sort_time))
            out.append(ReportGroup(year=year, semester=semester, classes=items))
        return out

    def export_class_workbook(self, class_id: str) -> bytes:
        """Class sheet as an .xlsx file (title, term, blank, header, one row per student)."""
        sheet = self.class_sheet(class_id)
        school_class = sheet.school_class

        aoa: list[list] = [
            [f"RELATÓRIO DE FREQUÊNCIA - {school_class.course_name.upper()}"],
            [f"Período: {school_class.year} • {school_class.semester}"],
            [],
            sheet.header,
            *sheet.as_rows(),
        ]
        df = pd.DataFrame(aoa)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, header=False, sheet_name=SHEET_NAME)
            ws = writer.sheets[SHEET_NAME]
            widths = [30, *([6] * len(sheet.dates)), 8, 10, 12]
            for i, width in enumerate(widths, start=1):
                ws.column_dimensions[get_column_letter(i)].width = width
        return output.getvalue()

