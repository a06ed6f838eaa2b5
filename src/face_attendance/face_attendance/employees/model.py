from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Employee.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    ``face_descriptor`` keeps the stored wire text; it is decoded by the roster.
    """

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    department_id: Optional[int] = None
    face_descriptor: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_face(self) -> bool:
        return bool(self.face_descriptor and self.face_descriptor.strip())

    def summary(self) -> dict:
        return {
            "id": self.employee_id,
            "employeeCode": self.employee_code,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "departmentId": self.department_id,
        }
