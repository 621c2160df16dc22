from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Callable, Optional

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..state.app_state import HolidayDeleted, HolidaySaved
from ..state.store import StateStore
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, holidays: HolidayRepository, store: StateStore, *, id_factory: Callable[[], str] | None = None):
        self._holidays = holidays
        self._store = store
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def list_holidays(self) -> list[Holiday]:
        return sorted(self._store.state.holidays, key=lambda h: h.date)

    def holidays_in_month(self, year: int, month: int) -> list[Holiday]:
        return [h for h in self.list_holidays() if h.date.year == int(year) and h.date.month == int(month)]

    def add(self, *, name: str, day: Optional[date]) -> Holiday:
        name = require_non_empty(name, "Nome do feriado")
        if day is None:
            raise ValidationError("Data do feriado é obrigatória")

        with self._store.transaction():
            holiday = self._holidays.save(Holiday(holiday_id=self._new_id(), date=day, name=name))
            self._store.dispatch(HolidaySaved(holiday))
        return holiday

    def delete(self, holiday_id: str) -> None:
        with self._store.transaction() as state:
            if not any(h.holiday_id == holiday_id for h in state.holidays):
                raise NotFoundError("Feriado não encontrado")
            self._holidays.delete(holiday_id)
            self._store.dispatch(HolidayDeleted(holiday_id))
        logger.info("Holiday %s deleted", holiday_id)
