from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class EarningsRecord:
    """Saved instructor earnings estimate for one month ("MM-YYYY")."""

    record_id: str
    month: str
    value_per_class: Decimal
    classes_per_day: int
    total_classes: int
    total_amount: Decimal
    selected_days: tuple[date, ...] = field(default_factory=tuple)
    updated_at: datetime | None = None

    @property
    def year(self) -> int:
        return int(self.month.split("-")[1])

    @property
    def month_number(self) -> int:
        return int(self.month.split("-")[0])

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "month": self.month,
            "value_per_class": str(self.value_per_class),
            "classes_per_day": self.classes_per_day,
            "total_classes": self.total_classes,
            "total_amount": str(self.total_amount),
            "selected_days": [d.isoformat() for d in self.selected_days],
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
