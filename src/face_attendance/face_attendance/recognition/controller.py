from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.responses import error_response, json_body
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import TimeLogType
from ..core.exceptions import DomainError, ValidationError
from .service import RecognitionResult

logger = logging.getLogger(__name__)


def _parse_log_type(value, field_name: str) -> TimeLogType:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return TimeLogType.parse(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be check-in or check-out")


def _success_payload(result: RecognitionResult) -> dict:
    action = "Check-out" if result.event.log_type is TimeLogType.CHECKOUT else "Check-in"
    return {
        "success": True,
        "employee": result.employee.summary(),
        "distance": result.match.distance,
        "confidence": result.match.confidence,
        "logTime": result.event.log_time.isoformat(),
        "timeLog": result.event.to_dict(),
        "workHours": (
            {
                "date": result.work_hours.work_date.isoformat(),
                "regularHours": result.work_hours.regular_hours,
                "overtimeHours": result.work_hours.overtime_hours,
                "status": result.work_hours.status.value,
            }
            if result.work_hours
            else None
        ),
        "message": f"{action} successful for {result.employee.full_name}",
    }


def register(app: Flask, container: Container) -> None:
    def _identify_and_record(raw_descriptor, log_type: TimeLogType):
        result = container.face_attendance_service.identify_and_record(raw_descriptor, log_type)
        return jsonify(_success_payload(result)), 201

    @app.route("/time-logs", methods=["POST"], endpoint="create_time_log")
    def create_time_log():
        """Body: {faceDescriptor: string | number[], type: "checkin" | "checkout"}"""
        try:
            data = json_body()
            descriptor = require_non_empty(data.get("faceDescriptor"), "Face descriptor")
            log_type = _parse_log_type(data.get("type"), "Type (checkin/checkout)")
            return _identify_and_record(descriptor, log_type)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error creating time log")
            return jsonify({"success": False, "error": "Failed to create time log", "code": "internal_error"}), 500

    @app.route("/face-recognition/verify", methods=["POST"], endpoint="verify_face")
    def verify_face():
        """Body: {descriptor: string, mode: "check_in" | "check_out"}"""
        try:
            data = json_body()
            descriptor = require_non_empty(data.get("descriptor"), "Descriptor")
            log_type = _parse_log_type(data.get("mode"), "Mode (check_in/check_out)")
            return _identify_and_record(descriptor, log_type)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error verifying face")
            return jsonify({"success": False, "error": "Failed to verify attendance", "code": "internal_error"}), 500
