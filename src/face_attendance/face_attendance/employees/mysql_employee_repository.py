from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, employee_code, first_name, last_name, department_id, face_descriptor"


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        department_id=row.get("department_id"),
        face_descriptor=row.get("face_descriptor"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY employee_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_with_face_descriptor(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE face_descriptor IS NOT NULL AND face_descriptor <> ''
                ORDER BY employee_id ASC
                """
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def set_face_descriptor(self, employee_id: int, face_descriptor: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET face_descriptor=%s WHERE employee_id=%s",
                (face_descriptor, int(employee_id)),
            )
            return cur.rowcount > 0
