from __future__ import annotations

from typing import Protocol, Sequence

from .model import EarningsRecord


class EarningsRepository(Protocol):
    def list_all(self) -> Sequence[EarningsRecord]:
        raise NotImplementedError

    def save(self, record: EarningsRecord) -> EarningsRecord:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError
