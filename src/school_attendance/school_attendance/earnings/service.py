from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_CLASSES_PER_DAY
from ..core.exceptions import NotFoundError, ValidationError
from .calculator import annual_total, month_key, total_amount, total_classes
from .model import EarningsRecord
from .repository import EarningsRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EarningsDefaults:
    value_per_class: Decimal
    classes_per_day: int

    def to_dict(self) -> dict:
        return {"value_per_class": str(self.value_per_class), "classes_per_day": self.classes_per_day}


def _to_decimal(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Valor por aula inválido") from None
    if amount < 0:
        raise ValidationError("Valor por aula não pode ser negativo")
    return amount


class EarningsService:
    def __init__(self, earnings: EarningsRepository, *, id_factory: Callable[[], str] | None = None):
        self._earnings = earnings
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def history(self) -> list[EarningsRecord]:
        """Saved months, newest first."""
        return sorted(self._earnings.list_all(), key=lambda r: (r.year, r.month_number), reverse=True)

    def get_month(self, year: int, month: int) -> Optional[EarningsRecord]:
        key = month_key(year, month)
        return next((r for r in self._earnings.list_all() if r.month == key), None)

    def defaults(self) -> EarningsDefaults:
        """Value and classes-per-day of the most recent saved month."""
        latest = next(iter(self.history()), None)
        if latest is None:
            return EarningsDefaults(value_per_class=Decimal("0"), classes_per_day=DEFAULT_CLASSES_PER_DAY)
        return EarningsDefaults(value_per_class=latest.value_per_class, classes_per_day=latest.classes_per_day)

    def annual_total(self, year: int) -> Decimal:
        return annual_total(self._earnings.list_all(), year)

    def save_month(
        self,
        *,
        year: int,
        month: int,
        value_per_class,
        classes_per_day: int,
        selected_days: Iterable[date],
    ) -> EarningsRecord:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Mês inválido")
        if int(classes_per_day) < 1:
            raise ValidationError("Aulas por dia deve ser ao menos 1")
        value = _to_decimal(value_per_class)

        days = tuple(sorted(set(selected_days)))
        outside = [d for d in days if d.year != int(year) or d.month != int(month)]
        if outside:
            raise ValidationError("Dias selecionados fora do mês")

        count = total_classes(days, classes_per_day)
        existing = self.get_month(year, month)
        record = EarningsRecord(
            record_id=existing.record_id if existing else self._new_id(),
            month=month_key(year, month),
            value_per_class=value,
            classes_per_day=int(classes_per_day),
            total_classes=count,
            total_amount=total_amount(count, value),
            selected_days=days,
            updated_at=now_local(),
        )
        saved = self._earnings.save(record)
        logger.info("Earnings for %s saved: %d classes, %s", saved.month, saved.total_classes, saved.total_amount)
        return saved

    def delete(self, record_id: str) -> None:
        if not self._earnings.delete(record_id):
            raise NotFoundError("Registro de ganhos não encontrado")
