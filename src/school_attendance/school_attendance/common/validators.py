from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

from ..core.constants import ALLOWED_WEEKLY_FREQUENCIES
from ..core.enums import Weekday
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return value.strip()


def digits_only(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def require_weekdays(values: Iterable[str | Weekday]) -> tuple[Weekday, ...]:
    days: list[Weekday] = []
    for value in values:
        try:
            day = Weekday(value)
        except ValueError:
            raise ValidationError(f"Dia da semana inválido: {value}") from None
        if day not in days:
            days.append(day)
    if not days:
        raise ValidationError("Selecione ao menos um dia")
    return tuple(days)


def require_frequency(value: int) -> int:
    if int(value) not in ALLOWED_WEEKLY_FREQUENCIES:
        raise ValidationError("Frequência semanal deve ser 1 ou 2")
    return int(value)


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if (start is None) != (end is None):
        raise ValidationError("Informe data de início e de fim")
    if start is not None and end is not None and end < start:
        raise ValidationError("Data de fim anterior à data de início")
