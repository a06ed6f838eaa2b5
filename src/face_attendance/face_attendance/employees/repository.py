from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Giao diện repository cho Employee.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_with_face_descriptor(self) -> Sequence[Employee]:
        """Employees with a non-empty descriptor, ordered by employee_id."""

        raise NotImplementedError

    def set_face_descriptor(self, employee_id: int, face_descriptor: Optional[str]) -> bool:
        raise NotImplementedError
