from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.deduction_engine.deduction_engine.attendance.materializer import RecordMaterializer
from src.deduction_engine.deduction_engine.attendance.model import ProcessingRequest
from src.deduction_engine.deduction_engine.attendance.service import AttendanceProcessingService
from src.deduction_engine.deduction_engine.attendance_types.model import AttendanceType
from src.deduction_engine.deduction_engine.core.actor import Actor
from src.deduction_engine.deduction_engine.core.enums import IssueType, NotificationType, OutcomeStatus, ProcessType
from src.deduction_engine.deduction_engine.core.exceptions import SourceReadError
from src.deduction_engine.deduction_engine.deductions.model import DeductionRule
from src.deduction_engine.deduction_engine.employees.model import Employee
from src.deduction_engine.deduction_engine.notifications.service import NotificationDispatcher
from src.deduction_engine.deduction_engine.punches.model import RawPunch

DAY = date(2024, 1, 15)
NOW = datetime(2024, 1, 15, 23, 30)

OFFICE = AttendanceType(
    type_id="at-office",
    type_name="office",
    fixed_start_time=time(8, 0),
    fixed_end_time=time(16, 0),
    allow_late_minutes=10,
)
LATE_RULE = DeductionRule(
    rule_id="dr-late-1",
    rule_name="Late up to 30 minutes",
    rule_type="late_arrival",
    deduction_type="percentage",
    deduction_value=Decimal("0.1"),
    min_minutes=0,
    max_minutes=30,
)
ABSENCE_RULE = DeductionRule(
    rule_id="dr-absence",
    rule_name="Absence",
    rule_type="absence",
    deduction_type="percentage",
    deduction_value=Decimal("1"),
)


def employee(code, *, user_id=None, email=None, salary="3000"):
    return Employee(
        employee_id=f"emp-{code}",
        employee_number=f"E{code}",
        first_name="Test",
        last_name=code,
        zk_employee_code=code,
        attendance_type_id="at-office",
        email=email,
        user_id=user_id,
        basic_salary=Decimal(salary) if salary is not None else None,
    )


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._employees = list(employees)

    def list_active_with_zk_code(self):
        return list(self._employees)

    def list_by_zk_codes(self, codes):
        return [e for e in self._employees if e.zk_employee_code in codes]


class FakeTypesRepo:
    def __init__(self, types=(OFFICE,)):
        self._types = list(types)

    def list_all(self):
        return list(self._types)


class FakeRulesRepo:
    def __init__(self, rules=(LATE_RULE, ABSENCE_RULE)):
        self._rules = list(rules)

    def list_active(self):
        return list(self._rules)

    def get_by_ids(self, rule_ids):
        return [r for r in self._rules if r.rule_id in rule_ids]


class FakePunchesRepo:
    def __init__(self, punches=(), *, fail_reads=False):
        self.punches = list(punches)
        self.fail_reads = fail_reads
        self.mark_calls: list[list[int]] = []

    def list_for_date(self, attendance_date):
        if self.fail_reads:
            raise ConnectionError("device log unavailable")
        return [p for p in self.punches if p.attendance_date == attendance_date]

    def mark_processed(self, punch_ids, *, processed_at):
        self.mark_calls.append(list(punch_ids))
        ids = set(punch_ids)
        self.punches = [
            RawPunch(p.punch_id, p.employee_code, p.attendance_date, p.attendance_time, p.record_type, True)
            if p.punch_id in ids
            else p
            for p in self.punches
        ]
        return len(ids)


class FakeSummariesRepo:
    def __init__(self, *, fail_for=()):
        self.rows = {}
        self.flags = []
        self.fail_for = set(fail_for)

    def upsert_summary(self, summary):
        if summary.employee_code in self.fail_for:
            raise RuntimeError("summary write failed")
        self.rows[(summary.employee_code, summary.attendance_date)] = summary

    def mark_notification_sent(self, *, employee_code, attendance_date, process_type, sent_at):
        self.flags.append((employee_code, attendance_date, process_type))
        return True

    def list_pending_deduction_notifications(self, attendance_date):
        return []

    def mark_deduction_notification_sent(self, *, summary_id, sent_at):
        return True


class FakeTimesheetsRepo:
    def __init__(self, *, fail_for=()):
        self.rows = {}
        self.fail_for = set(fail_for)

    def upsert_timesheet(self, entry):
        if entry.employee_id in self.fail_for:
            raise RuntimeError("timesheet write failed")
        self.rows[(entry.employee_id, entry.work_date)] = entry


class FakeNotificationsRepo:
    def __init__(self, *, fail_for_users=()):
        self.rows = []
        self.fail_for_users = set(fail_for_users)

    def insert(self, notification):
        if notification.user_id in self.fail_for_users:
            raise RuntimeError("notification insert failed")
        self.rows.append(notification)
        return len(self.rows)


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, *, to, subject, html):
        self.sent.append((to, subject))


def punch(punch_id, code, hh, mm):
    return RawPunch(punch_id=punch_id, employee_code=code, attendance_date=DAY, attendance_time=time(hh, mm))


def build(
    employees,
    punches=(),
    *,
    rules=(LATE_RULE, ABSENCE_RULE),
    summaries=None,
    timesheets=None,
    notifications=None,
    punches_repo=None,
    consume_per_employee=False,
):
    summaries = summaries or FakeSummariesRepo()
    timesheets = timesheets or FakeTimesheetsRepo()
    notifications = notifications or FakeNotificationsRepo()
    punches_repo = punches_repo or FakePunchesRepo(punches)
    mailer = FakeMailer()
    service = AttendanceProcessingService(
        FakeEmployeesRepo(employees),
        FakeTypesRepo(),
        FakeRulesRepo(rules),
        punches_repo,
        RecordMaterializer(summaries, timesheets),
        NotificationDispatcher(notifications, summaries, mailer=mailer, clock=lambda: NOW),
        consume_punches_per_employee=consume_per_employee,
        clock=lambda: NOW,
    )
    return service, summaries, timesheets, notifications, punches_repo, mailer


def test_morning_late_arrival_creates_deduction():
    service, summaries, timesheets, notifications, punches_repo, _ = build(
        [employee("1001")], [punch(1, "1001", 8, 25)]
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.processed_count == 1
    result = run.results[0]
    assert result.late_minutes == 15
    assert result.deduction_amount == Decimal("10.00")
    assert result.deduction_rule_id == "dr-late-1"
    assert result.has_issues is True
    assert result.issue_type is IssueType.DEDUCTION

    summary = summaries.rows[("1001", DAY)]
    assert summary.in_time == time(8, 25)
    assert summary.out_time is None
    assert summary.saved_by is None
    assert summary.auto_processed is True
    assert summary.processing_source == "zk_auto"

    timesheet = timesheets.rows[("emp-1001", DAY)]
    assert timesheet.actual_start == time(8, 25)
    assert timesheet.actual_end is None
    assert timesheet.is_absent is False
    assert timesheet.notes == "Auto-processed from ZK attendance (morning)"

    assert punches_repo.mark_calls == [[1]]
    assert run.consumed_punch_count == 1
    assert [o.status for o in run.outcomes] == [OutcomeStatus.OK]


def test_morning_skips_employees_without_punches():
    service, summaries, timesheets, *_ = build([employee("1001"), employee("1002")], [punch(1, "1001", 7, 58)])

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert [r.employee_code for r in run.results] == ["1001"]
    assert ("1002", DAY) not in summaries.rows
    assert ("emp-1002", DAY) not in timesheets.rows
    assert run.results[0].has_issues is False
    assert run.results[0].issue_type is None


def test_morning_reports_out_time_without_persisting_it():
    service, summaries, *_ = build([employee("1001")], [punch(1, "1001", 8, 0), punch(2, "1001", 15, 0)])

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.results[0].out_time == time(15, 0)
    assert run.results[0].early_exit_minutes == 0
    assert summaries.rows[("1001", DAY)].out_time is None


def test_evening_missing_out_is_flagged():
    service, summaries, timesheets, *_ = build([employee("1001")], [punch(1, "1001", 8, 0), punch(2, "1001", 9, 30)])

    run = service.process(ProcessingRequest(process_type=ProcessType.EVENING, target_date=DAY))

    result = run.results[0]
    assert result.out_time is None
    assert result.deduction_amount == Decimal("0.00")
    assert result.has_issues is True
    assert result.issue_type is IssueType.MISSING_OUT
    assert summaries.rows[("1001", DAY)].total_hours is None


def test_evening_without_punches_is_absent():
    service, summaries, timesheets, *_ = build([employee("1001")])

    run = service.process(ProcessingRequest(process_type=ProcessType.EVENING, target_date=DAY))

    result = run.results[0]
    assert result.deduction_amount == Decimal("100.00")
    assert result.deduction_rule_id == "dr-absence"
    assert result.issue_type is IssueType.DEDUCTION
    timesheet = timesheets.rows[("emp-1001", DAY)]
    assert timesheet.is_absent is True
    assert timesheet.absence_reason == "No check-in recorded"


def test_evening_full_day_writes_both_times():
    service, summaries, timesheets, *_ = build(
        [employee("1001")], [punch(1, "1001", 7, 55), punch(2, "1001", 13, 0), punch(3, "1001", 16, 0)]
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.EVENING, target_date=DAY))

    summary = summaries.rows[("1001", DAY)]
    assert summary.in_time == time(7, 55)
    assert summary.out_time == time(16, 0)
    assert summary.total_hours == 8.08
    assert summary.expected_hours == 8.0
    assert summary.has_issues is False
    timesheet = timesheets.rows[("emp-1001", DAY)]
    assert timesheet.total_work_minutes == 485
    assert timesheet.actual_end == time(16, 0)
    assert run.results[0].to_dict()["out_time"] == "16:00:00"


def test_rerunning_a_date_is_idempotent():
    punches_repo = FakePunchesRepo([punch(1, "1001", 8, 25), punch(2, "1001", 16, 0)])
    service, summaries, timesheets, *_ = build([employee("1001")], punches_repo=punches_repo)
    request = ProcessingRequest(process_type=ProcessType.EVENING, target_date=DAY, send_notifications=False)

    first = service.process(request)
    first_summary = summaries.rows[("1001", DAY)]
    second = service.process(request)

    assert len(summaries.rows) == 1
    assert len(timesheets.rows) == 1
    assert summaries.rows[("1001", DAY)] == first_summary
    assert [r.to_dict() for r in first.results] == [r.to_dict() for r in second.results]
    assert second.consumed_punch_count == 0


def test_summary_failure_still_writes_timesheet():
    summaries = FakeSummariesRepo(fail_for={"1001"})
    service, _, timesheets, _, punches_repo, _ = build(
        [employee("1001"), employee("1002")],
        [punch(1, "1001", 8, 0), punch(2, "1002", 8, 0)],
        summaries=summaries,
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.processed_count == 2
    assert ("emp-1001", DAY) in timesheets.rows
    assert [o.status for o in run.outcomes] == [OutcomeStatus.SUMMARY_WRITE_FAILED, OutcomeStatus.OK]
    assert run.outcomes[0].error == "summary write failed"
    assert punches_repo.mark_calls == [[1, 2]]


def test_timesheet_failure_drops_employee():
    timesheets = FakeTimesheetsRepo(fail_for={"emp-1001"})
    notifications = FakeNotificationsRepo()
    service, summaries, _, _, punches_repo, _ = build(
        [employee("1001", user_id="u-1"), employee("1002", user_id="u-2")],
        [punch(1, "1001", 8, 0), punch(2, "1002", 8, 0)],
        timesheets=timesheets,
        notifications=notifications,
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert [r.employee_code for r in run.results] == ["1002"]
    assert run.outcomes[0].status is OutcomeStatus.TIMESHEET_WRITE_FAILED
    assert punches_repo.mark_calls == [[2]]
    assert [n.user_id for n in notifications.rows] == ["u-2"]


def test_source_read_failure_writes_nothing():
    punches_repo = FakePunchesRepo(fail_reads=True)
    service, summaries, timesheets, notifications, *_ = build([employee("1001")], punches_repo=punches_repo)

    with pytest.raises(SourceReadError):
        service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert summaries.rows == {}
    assert timesheets.rows == {}
    assert notifications.rows == []


def test_notifications_sent_after_writes():
    service, summaries, _, notifications, _, mailer = build(
        [employee("1001", user_id="u-1", email="a@example.com"), employee("1002")],
        [punch(1, "1001", 8, 25), punch(2, "1002", 8, 0)],
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.notifications_sent == 1
    assert len(notifications.rows) == 1
    notification = notifications.rows[0]
    assert notification.type is NotificationType.ATTENDANCE
    assert notification.data["late_minutes"] == 15
    assert summaries.flags == [("1001", DAY, ProcessType.MORNING)]
    assert mailer.sent == [("a@example.com", notification.title)]


def test_notifications_can_be_disabled():
    service, _, _, notifications, *_ = build([employee("1001", user_id="u-1")], [punch(1, "1001", 8, 0)])

    run = service.process(
        ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY, send_notifications=False)
    )

    assert run.notifications_sent == 0
    assert notifications.rows == []


def test_notification_failure_does_not_affect_processed_count():
    notifications = FakeNotificationsRepo(fail_for_users={"u-1"})
    service, *_ = build(
        [employee("1001", user_id="u-1"), employee("1002", user_id="u-2")],
        [punch(1, "1001", 8, 0), punch(2, "1002", 8, 0)],
        notifications=notifications,
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.processed_count == 2
    assert run.notifications_sent == 1
    assert [o.status for o in run.outcomes] == [OutcomeStatus.NOTIFY_FAILED, OutcomeStatus.OK]


def test_per_employee_punch_consumption():
    service, _, _, _, punches_repo, _ = build(
        [employee("1001"), employee("1002")],
        [punch(1, "1001", 8, 0), punch(2, "1002", 8, 0), punch(3, "1002", 8, 1)],
        consume_per_employee=True,
    )

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert punches_repo.mark_calls == [[1], [2, 3]]
    assert run.consumed_punch_count == 3


def test_user_actor_is_recorded_as_saved_by():
    service, summaries, *_ = build([employee("1001")], [punch(1, "1001", 8, 0)])

    service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY), Actor.user("hr-7"))

    assert summaries.rows[("1001", DAY)].saved_by == "hr-7"


def test_missing_salary_means_no_deduction():
    service, *_ = build([employee("1001", salary=None)], [punch(1, "1001", 8, 25)])

    run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    assert run.results[0].deduction_amount == Decimal("0.00")
    assert run.results[0].issue_type is None


def test_run_result_payload():
    service, *_ = build([employee("1001")], [punch(1, "1001", 8, 25)])

    payload = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY)).to_dict()

    assert payload["success"] is True
    assert payload["message"] == "Processed 1 attendance records"
    assert payload["processed_count"] == 1
    assert payload["results"][0]["deduction_amount"] == 10.0
    assert payload["results"][0]["issue_type"] == "deduction"
    assert payload["outcomes"] == [{"employee_code": "1001", "status": "ok", "error": None}]


def test_overlapping_rules_are_logged_and_first_match_still_applies(caplog):
    overlapping = DeductionRule(
        rule_id="dr-late-wide",
        rule_name="Late any amount",
        rule_type="late_arrival",
        deduction_type="fixed",
        deduction_value=Decimal("50"),
        min_minutes=10,
    )
    service, *_ = build([employee("1001")], [punch(1, "1001", 8, 25)], rules=(LATE_RULE, overlapping))

    with caplog.at_level(logging.WARNING):
        run = service.process(ProcessingRequest(process_type=ProcessType.MORNING, target_date=DAY))

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "dr-late-1" in warnings[0] and "dr-late-wide" in warnings[0]
    assert run.results[0].deduction_rule_id == "dr-late-1"
    assert run.results[0].deduction_amount == Decimal("10.00")
