from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import WorkDayStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import DailyWorkHours
from .repository import WorkHoursRepository

_COLUMNS = "employee_id, work_date, regular_hours, overtime_hours, first_checkin, last_checkout, status"


def _to_row(r: dict) -> DailyWorkHours:
    return DailyWorkHours(
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        regular_hours=as_float(r.get("regular_hours")),
        overtime_hours=as_float(r.get("overtime_hours")),
        first_checkin=r.get("first_checkin"),
        last_checkout=r.get("last_checkout"),
        status=WorkDayStatus(r.get("status") or WorkDayStatus.NORMAL.value),
    )


class MySQLWorkHoursRepository(WorkHoursRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_hours WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_row(r) if r else None

    def list_for_date(self, work_date: date) -> Sequence[DailyWorkHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_hours WHERE work_date=%s ORDER BY employee_id ASC",
                (work_date,),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def upsert(self, row: DailyWorkHours) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_hours(employee_id, work_date, regular_hours, overtime_hours,
                                       first_checkin, last_checkout, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    first_checkin=VALUES(first_checkin),
                    last_checkout=VALUES(last_checkout),
                    status=VALUES(status)
                """,
                (
                    row.employee_id,
                    row.work_date,
                    round(row.regular_hours, 2),
                    round(row.overtime_hours, 2),
                    row.first_checkin,
                    row.last_checkout,
                    row.status.value,
                ),
            )

    def delete(self, employee_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM work_hours WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            return cur.rowcount > 0
