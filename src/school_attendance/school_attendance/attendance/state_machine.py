from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus

# unmarked -> present -> absent -> justified -> unmarked
_NEXT: dict[Optional[AttendanceStatus], Optional[AttendanceStatus]] = {
    None: AttendanceStatus.PRESENT,
    AttendanceStatus.PRESENT: AttendanceStatus.ABSENT,
    AttendanceStatus.ABSENT: AttendanceStatus.JUSTIFIED,
    AttendanceStatus.JUSTIFIED: None,
}


def advance(current: Optional[AttendanceStatus]) -> Optional[AttendanceStatus]:
    """Next status of a cell on click. ``None`` means unmarked."""
    return _NEXT[current]
