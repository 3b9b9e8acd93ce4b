from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_local, yesterday_local
from ..common.validators import require_bool, require_iso_date, require_process_type
from ..container import Container
from ..core.exceptions import SourceReadError, ValidationError
from .model import ProcessingRequest

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/process", methods=["POST"], endpoint="process_attendance")
    def process_attendance():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return jsonify({"success": False, "error": "request body must be a JSON object"}), 400
        try:
            processing_request = ProcessingRequest(
                process_type=require_process_type(payload.get("process_type")),
                target_date=require_iso_date(payload.get("target_date"), default=today_local()),
                send_notifications=require_bool(
                    payload.get("send_notifications"), "send_notifications", default=True
                ),
            )
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        try:
            result = container.processing_service.process(processing_request)
        except SourceReadError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        except Exception as e:
            logger.exception("Unexpected error processing attendance")
            return jsonify({"success": False, "error": str(e)}), 500

        return jsonify(result.to_dict())

    @app.route(
        "/api/attendance/deduction-notifications", methods=["POST"], endpoint="send_deduction_notifications"
    )
    def send_deduction_notifications():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return jsonify({"success": False, "error": "request body must be a JSON object"}), 400
        try:
            target_date = require_iso_date(payload.get("target_date"), default=yesterday_local())
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        try:
            result = container.deduction_notification_service.notify_pending(target_date)
        except Exception as e:
            logger.exception("Error sending deduction notifications")
            return jsonify({"success": False, "error": str(e)}), 500

        return jsonify(result.to_dict())
