from __future__ import annotations

from typing import Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def list_all(self) -> Sequence[SchoolClass]:
        """All classes ordered by display position."""

        raise NotImplementedError

    def save(self, school_class: SchoolClass) -> SchoolClass:
        raise NotImplementedError

    def save_all(self, classes: Sequence[SchoolClass]) -> Sequence[SchoolClass]:
        """Bulk upsert in a single transaction."""

        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        raise NotImplementedError
