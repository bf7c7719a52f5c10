from datetime import date
from types import SimpleNamespace

import pytest

from leave_approval.models.base.enums import LeaveAction, LeaveStage
from leave_approval.services.base.service_result import ErrorCode
from leave_approval.services.leave.leave_statistics_service import compute_statistics, inclusive_days


def request(status, start="2024-01-15", end="2024-01-16"):
    return SimpleNamespace(status=status, start_date=start, end_date=end)


class TestComputeStatistics:

    def test_single_approved_two_day_leave(self):
        stats = compute_statistics([request("approved", date(2024, 1, 15), date(2024, 1, 16))])
        assert stats.days_used == 2
        assert (stats.total, stats.approved, stats.pending, stats.rejected) == (1, 1, 0, 0)

    def test_no_approved_requests(self):
        stats = compute_statistics([request("pending"), request("rejected")])
        assert stats.days_used == 0
        assert (stats.total, stats.pending, stats.rejected) == (2, 1, 1)

    def test_empty(self):
        assert compute_statistics([]).total == 0

    def test_only_approved_days_count(self):
        stats = compute_statistics([
            request("approved", "2024-02-01", "2024-02-03"),
            request("rejected", "2024-03-01", "2024-03-10"),
            request("approved", "2024-04-05", "2024-04-05"),
        ])
        assert stats.days_used == 4

    def test_invalid_dates_are_excluded(self):
        stats = compute_statistics([
            request("approved", "not-a-date", "2024-01-16"),
            request("approved", "2024-01-20", "2024-01-18"),
            request("approved", None, None),
            request("approved", "2024-01-15", "2024-01-16"),
        ])
        assert stats.approved == 4
        assert stats.days_used == 2


@pytest.mark.parametrize("start,end,expected", [
    ("2024-01-15", "2024-01-15", 1),
    ("2024-01-31", "2024-02-01", 2),
    (date(2024, 2, 28), date(2024, 3, 1), 3),
    ("2024-01-16", "2024-01-15", None),
    ("", "2024-01-15", None),
])
def test_inclusive_days(start, end, expected):
    assert inclusive_days(start, end) == expected


class TestStatisticsService:

    def test_student_statistics(self, services, submit, users):
        student = users["student"]
        assert services.statistics.student_statistics(student.id).data.days_used == 0

        leave = submit(student)
        for stage in (LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL):
            services.leave_requests.act(leave.id, stage, LeaveAction.APPROVE)
        submit(student, start_date=date(2024, 3, 1), end_date=date(2024, 3, 5))

        stats = services.statistics.student_statistics(student.id).data
        assert stats.student_id == student.id
        assert (stats.total, stats.approved, stats.pending) == (2, 1, 1)
        assert stats.days_used == 2

    def test_unknown_student(self, services, users):
        assert services.statistics.student_statistics("missing").error.code == ErrorCode.NOT_FOUND

    def test_stage_statistics_counts_requests_that_reached_stage(self, services, submit, users):
        submit(users["student"])
        at_hod = submit(users["hostel_student"])
        services.leave_requests.act(at_hod.id, LeaveStage.MENTOR, LeaveAction.APPROVE)
        rejected_at_mentor = submit(users["orphan_student"])
        services.leave_requests.act(rejected_at_mentor.id, LeaveStage.MENTOR, LeaveAction.REJECT)

        mentor_stats = services.statistics.stage_statistics(LeaveStage.MENTOR).data
        assert (mentor_stats.total, mentor_stats.pending, mentor_stats.rejected) == (3, 2, 1)

        hod_stats = services.statistics.stage_statistics(LeaveStage.HOD).data
        assert hod_stats.total == 1
        assert hod_stats.stage == LeaveStage.HOD

        assert services.statistics.stage_statistics("warden").data.total == 0

    def test_stage_statistics_by_department(self, services, submit, users):
        submit(users["student"])
        submit(users["orphan_student"])

        stats = services.statistics.stage_statistics("mentor", department="MECH").data
        assert stats.total == 1
        assert stats.department == "MECH"

    def test_invalid_stage(self, services, users):
        assert services.statistics.stage_statistics("guardian").error.code == ErrorCode.VALIDATION_ERROR
