from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.core.exceptions import NotFoundError, ValidationError
from src.school_attendance.school_attendance.holidays.service import HolidayService
from src.school_attendance.school_attendance.state.store import StateStore


class FakeHolidayRepo:
    def __init__(self):
        self.rows = {}

    def list_all(self):
        return list(self.rows.values())

    def save(self, holiday):
        self.rows[holiday.holiday_id] = holiday
        return holiday

    def delete(self, holiday_id):
        return self.rows.pop(holiday_id, None) is not None


def _service():
    counter = iter(range(1, 100))
    repo = FakeHolidayRepo()
    return repo, HolidayService(repo, StateStore(), id_factory=lambda: f"h{next(counter)}")


def test_holidays_are_listed_by_date_and_filtered_by_month():
    _, service = _service()
    service.add(name="Tiradentes", day=date(2024, 4, 21))
    service.add(name="Carnaval", day=date(2024, 2, 13))
    service.add(name="Paixão de Cristo", day=date(2024, 3, 29))

    assert [h.name for h in service.list_holidays()] == ["Carnaval", "Paixão de Cristo", "Tiradentes"]
    assert [h.name for h in service.holidays_in_month(2024, 4)] == ["Tiradentes"]
    assert service.holidays_in_month(2025, 4) == []


@pytest.mark.parametrize("name,day", [("", date(2024, 1, 1)), ("Ano Novo", None)])
def test_name_and_date_are_required(name, day):
    repo, service = _service()

    with pytest.raises(ValidationError):
        service.add(name=name, day=day)
    assert repo.rows == {}


def test_delete():
    repo, service = _service()
    holiday = service.add(name="Natal", day=date(2024, 12, 25))

    service.delete(holiday.holiday_id)

    assert service.list_holidays() == []
    assert repo.rows == {}
    with pytest.raises(NotFoundError):
        service.delete(holiday.holiday_id)
