from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Informational calendar marker; does not suppress session dates."""

    holiday_id: str
    date: date
    name: str

    def to_dict(self) -> dict:
        return {"id": self.holiday_id, "date": self.date.isoformat(), "name": self.name}
