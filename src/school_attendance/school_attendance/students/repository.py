from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def save(self, student: Student) -> Student:
        """Upsert by id; returns the stored row."""

        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError
