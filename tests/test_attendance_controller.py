from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from flask import Flask

from src.deduction_engine.deduction_engine.attendance.controller import register
from src.deduction_engine.deduction_engine.attendance.model import EmployeeResult, ProcessingRunResult
from src.deduction_engine.deduction_engine.core.enums import IssueType, ProcessType
from src.deduction_engine.deduction_engine.core.exceptions import SourceReadError
from src.deduction_engine.deduction_engine.notifications.deduction_service import DeductionNotificationResult


class FakeProcessingService:
    def __init__(self, *, error=None):
        self.requests = []
        self.error = error

    def process(self, request, actor=None):
        self.requests.append(request)
        if self.error:
            raise self.error
        return ProcessingRunResult(
            process_type=request.process_type,
            target_date=request.target_date,
            results=[
                EmployeeResult(
                    employee_code="1001",
                    date=request.target_date,
                    in_time=None,
                    out_time=None,
                    late_minutes=15,
                    early_exit_minutes=0,
                    deduction_amount=Decimal("10.00"),
                    deduction_rule_id="dr-late-1",
                    has_issues=True,
                    issue_type=IssueType.DEDUCTION,
                )
            ],
            notifications_sent=1,
        )


class FakeDeductionNotificationService:
    def __init__(self):
        self.dates = []

    def notify_pending(self, target_date=None):
        self.dates.append(target_date)
        return DeductionNotificationResult(target_date=target_date, count=3)


def make_client(processing=None, deductions=None):
    app = Flask(__name__)
    container = SimpleNamespace(
        processing_service=processing or FakeProcessingService(),
        deduction_notification_service=deductions or FakeDeductionNotificationService(),
    )
    register(app, container)
    return app.test_client(), container


def test_process_returns_run_summary():
    client, container = make_client()

    resp = client.post(
        "/api/attendance/process",
        json={"process_type": "evening", "target_date": "2024-01-15", "send_notifications": False},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Processed 1 attendance records"
    assert body["processed_count"] == 1
    assert body["notifications_sent"] == 1
    assert body["results"][0]["deduction_amount"] == 10.0
    request = container.processing_service.requests[0]
    assert request.process_type is ProcessType.EVENING
    assert request.target_date == date(2024, 1, 15)
    assert request.send_notifications is False


def test_process_defaults_to_morning_with_notifications():
    client, container = make_client()

    resp = client.post("/api/attendance/process", json={})

    assert resp.status_code == 200
    request = container.processing_service.requests[0]
    assert request.process_type is ProcessType.MORNING
    assert request.send_notifications is True


@pytest.mark.parametrize(
    "payload",
    [
        {"process_type": "night"},
        {"target_date": "15/01/2024"},
        {"send_notifications": "yes"},
        "evening",
        ["evening"],
    ],
)
def test_process_rejects_invalid_input(payload):
    client, container = make_client()

    resp = client.post("/api/attendance/process", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert container.processing_service.requests == []


def test_process_source_failure_is_500():
    client, _ = make_client(FakeProcessingService(error=SourceReadError("db down")))

    resp = client.post("/api/attendance/process", json={})

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "db down"}


def test_deduction_notifications_endpoint():
    client, container = make_client()

    resp = client.post("/api/attendance/deduction-notifications", json={"target_date": "2024-01-15"})

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Sent 3 deduction notifications", "count": 3}
    assert container.deduction_notification_service.dates == [date(2024, 1, 15)]


def test_deduction_notifications_rejects_non_object_body():
    client, container = make_client()

    resp = client.post("/api/attendance/deduction-notifications", json=["2024-01-15"])

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "request body must be a JSON object"}
    assert container.deduction_notification_service.dates == []
