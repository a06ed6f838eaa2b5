from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.responses import error_response, json_body
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/employees/<int:employee_id>/face-descriptor/verification-code",
        methods=["POST"],
        endpoint="request_face_verification_code",
    )
    def request_face_verification_code(employee_id: int):
        try:
            container.enrollment_service.request_verification_code(employee_id)
            return jsonify({"success": True, "message": "Verification code sent"}), 202
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error issuing verification code")
            return jsonify({"success": False, "error": "Failed to issue verification code"}), 500

    @app.route("/employees/<int:employee_id>/face-descriptor", methods=["POST"], endpoint="enroll_face")
    def enroll_face(employee_id: int):
        """Body: {descriptor: string | number[], verificationCode?: string}"""
        try:
            data = json_body()
            employee = container.enrollment_service.enroll(
                employee_id,
                require_non_empty(data.get("descriptor"), "Descriptor"),
                verification_code=data.get("verificationCode"),
            )
            return jsonify({"success": True, "employee": employee.summary(), "message": "Face data registered"}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error enrolling face")
            return jsonify({"success": False, "error": "Failed to register face data"}), 500

    @app.route("/employees/<int:employee_id>/face-descriptor", methods=["DELETE"], endpoint="reset_face")
    def reset_face(employee_id: int):
        try:
            container.enrollment_service.reset(employee_id)
            return jsonify({"success": True, "message": "Face data cleared"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error clearing face data")
            return jsonify({"success": False, "error": "Failed to clear face data"}), 500
