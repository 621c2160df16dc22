from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional


class AttendanceStatus(str, Enum):
    """Explicit mark stored for a student on a session date."""

    PRESENT = "presente"
    ABSENT = "ausente"
    JUSTIFIED = "justificado"

    @property
    def code(self) -> str:
        """Single-letter code used on sheets and exports."""
        return _STATUS_CODES[self]

    @property
    def counts_as_attended(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.JUSTIFIED)


_STATUS_CODES = {
    AttendanceStatus.PRESENT: "P",
    AttendanceStatus.ABSENT: "F",
    AttendanceStatus.JUSTIFIED: "J",
}


class StudentStatus(str, Enum):
    """Lifecycle of a student."""

    ACTIVE = "cursando"
    WITHDRAWN = "desistiu"
    COMPLETED = "concluiu"


class Weekday(str, Enum):
    """Weekday vocabulary used in class schedules (Monday first)."""

    MONDAY = "Segunda"
    TUESDAY = "Terça"
    WEDNESDAY = "Quarta"
    THURSDAY = "Quinta"
    FRIDAY = "Sexta"
    SATURDAY = "Sábado"
    SUNDAY = "Domingo"

    @property
    def abbreviation(self) -> str:
        return _WEEKDAY_ABBREVIATIONS[self]

    @property
    def order(self) -> int:
        """Same numbering as ``date.weekday()`` (Monday == 0)."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return _WEEKDAY_ORDER[day.weekday()]


_WEEKDAY_ORDER = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
]

_WEEKDAY_ABBREVIATIONS = {
    Weekday.MONDAY: "SEG",
    Weekday.TUESDAY: "TER",
    Weekday.WEDNESDAY: "QUA",
    Weekday.THURSDAY: "QUI",
    Weekday.FRIDAY: "SEX",
    Weekday.SATURDAY: "SAB",
    Weekday.SUNDAY: "DOM",
}


class Semester(str, Enum):
    """Half-year term labels as stored on classes."""

    FIRST = "1º Semestre"
    SECOND = "2º Semestre"

    @classmethod
    def parse(cls, label: Optional[str]) -> Optional["Semester"]:
        """Match a free-text label case- and whitespace-insensitively."""
        if label is None:
            return None
        key = normalize_label(label)
        for member in cls:
            if normalize_label(member.value) == key:
                return member
        return None

    @classmethod
    def for_date(cls, day: date) -> "Semester":
        return cls.FIRST if day.month <= 6 else cls.SECOND


def normalize_label(value: str) -> str:
    return " ".join(value.split()).lower()


class DashboardMode(str, Enum):
    ALWAYS = "always"
    PERIOD = "period"
