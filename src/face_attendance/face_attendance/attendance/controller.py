from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.responses import error_response
from ..container import Container
from ..core.exceptions import DomainError, EmployeeNotFoundError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _target_date():
        value = request.args.get("date")
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/employees/<int:employee_id>/time-logs", methods=["GET"], endpoint="employee_time_logs")
    def employee_time_logs(employee_id: int):
        try:
            work_date = _target_date()
            if not container.employees_repo.get_by_id(employee_id):
                raise EmployeeNotFoundError(f"Employee {employee_id} not found")
            logs = container.work_hours_service.get_employee_time_logs(employee_id, work_date)
            state = container.attendance_service.session_state(employee_id)
            return jsonify(
                {
                    "employeeId": employee_id,
                    "date": work_date.isoformat(),
                    "logs": [e.to_dict() for e in logs],
                    "sessionState": state.value,
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error fetching time logs")
            return jsonify({"success": False, "error": "Failed to fetch employee attendance"}), 500

    @app.route("/employees/<int:employee_id>/work-hours", methods=["GET"], endpoint="employee_work_hours")
    def employee_work_hours(employee_id: int):
        try:
            view = container.work_hours_service.get_employee_work_hours(employee_id, _target_date())
            return jsonify(view.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error fetching work hours")
            return jsonify({"success": False, "error": "Failed to fetch work hours"}), 500

    @app.route("/work-hours/daily", methods=["GET"], endpoint="daily_work_hours")
    def daily_work_hours():
        try:
            return jsonify(container.work_hours_service.get_daily_work_hours(_target_date()))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error fetching daily work hours")
            return jsonify({"success": False, "error": "Failed to fetch daily work hours"}), 500
