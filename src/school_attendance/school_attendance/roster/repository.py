from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..classes.model import SchoolClass
from ..students.model import Student


class RosterStore(Protocol):
    """Writes student and class rows that must change together.

    Every call is a single transaction: either all rows are written or none.
    """

    def save_batch(
        self,
        *,
        students: Sequence[Student] = (),
        classes: Sequence[SchoolClass] = (),
        delete_student_id: Optional[str] = None,
        delete_class_id: Optional[str] = None,
    ) -> None:
        raise NotImplementedError
