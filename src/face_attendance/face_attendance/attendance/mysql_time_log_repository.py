from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import TimeLogSource, TimeLogType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import TimeLogEvent
from .repository import TimeLogRepository


class MySQLTimeLogRepository(TimeLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_between(
        self,
        employee_id: int,
        *,
        start: datetime,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeLogEvent]:
        clauses = ["employee_id=%s", "log_time >= %s"]
        params: list[object] = [int(employee_id), start]
        if end is not None:
            clauses.append("log_time < %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, employee_id, log_type, log_time, source
                FROM time_logs
                WHERE {" AND ".join(clauses)}
                ORDER BY log_time ASC, log_id ASC
                """,
                tuple(params),
            )
            return [
                TimeLogEvent(
                    log_id=int(r["log_id"]),
                    employee_id=int(r["employee_id"]),
                    log_type=TimeLogType(r["log_type"]),
                    log_time=r["log_time"],
                    source=TimeLogSource(r.get("source") or TimeLogSource.FACE.value),
                )
                for r in fetchall(cur)
            ]

    def append(
        self,
        *,
        employee_id: int,
        log_type: TimeLogType,
        log_time: datetime,
        source: TimeLogSource,
    ) -> TimeLogEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_logs(employee_id, log_type, log_time, source)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), log_type.value, log_time, source.value),
            )
            return TimeLogEvent(
                log_id=int(cur.lastrowid),
                employee_id=int(employee_id),
                log_type=log_type,
                log_time=log_time,
                source=source,
            )
