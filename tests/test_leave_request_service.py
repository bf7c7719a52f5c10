import pytest

from leave_approval.core.exceptions import StateConflictError
from leave_approval.models.base.enums import LeaveAction, LeaveStage, LeaveStatus
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.services.base.service_result import ErrorCode


def stored(db_session, leave_id):
    db_session.expire_all()
    return db_session.get(LeaveRequest, leave_id)


def approve(services, leave_id, stage, **kwargs):
    return services.leave_requests.act(leave_id, stage, LeaveAction.APPROVE, **kwargs)


def reject(services, leave_id, stage, **kwargs):
    return services.leave_requests.act(leave_id, stage, LeaveAction.REJECT, **kwargs)


class TestCreate:

    def test_creates_pending_request_at_mentor(self, services, users, db_session, leave_payload):
        result = services.leave_requests.create_leave_request(leave_payload(users["student"]))

        assert result.is_success
        leave = result.data
        assert leave.status == LeaveStatus.PENDING
        assert leave.current_stage == LeaveStage.MENTOR
        assert leave.comments is None
        assert leave.final_artifact_ref is None
        assert leave.is_hostel_student is False
        assert stored(db_session, leave.id).stage_sequence == ["mentor", "hod", "principal"]

    def test_response_excludes_stage_sequence(self, submit, users):
        leave = submit(users["student"])
        assert "stage_sequence" not in leave.model_dump()

    def test_hostel_student_sequence_includes_warden(self, submit, users, db_session):
        leave = submit(users["hostel_student"])

        assert leave.is_hostel_student is True
        assert stored(db_session, leave.id).stage_sequence == ["mentor", "hod", "principal", "warden"]

    def test_notifies_mentor(self, services, submit, users):
        leave = submit(users["student"])

        notifications = services.notifications.list_for_user(users["mentor"].id).data
        assert len(notifications) == 1
        assert notifications[0].message == "New leave application requires your approval"
        assert notifications[0].related_leave_id == leave.id

    def test_end_before_start_is_rejected(self, services, users, db_session, leave_payload):
        from datetime import date

        result = services.leave_requests.create_leave_request(
            leave_payload(users["student"], start_date=date(2024, 1, 16), end_date=date(2024, 1, 15))
        )

        assert not result.is_success
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert db_session.query(LeaveRequest).count() == 0

    def test_missing_fields_are_validation_errors(self, services, users):
        result = services.leave_requests.create_leave_request({"student_id": users["student"].id})

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert "reason" in result.error.details["field_errors"]

    def test_unknown_student_is_not_found(self, services, users, leave_payload):
        payload = leave_payload(users["student"], student_id="missing")
        result = services.leave_requests.create_leave_request(payload)
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_only_students_may_apply(self, services, users, leave_payload):
        result = services.leave_requests.create_leave_request(leave_payload(users["mentor"]))
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_second_pending_request_is_refused(self, services, submit, users, leave_payload):
        first = submit(users["student"])

        result = services.leave_requests.create_leave_request(leave_payload(users["student"]))

        assert result.error.code == ErrorCode.CONFLICT
        assert result.error.details["pending_leave_id"] == first.id

    def test_new_request_allowed_once_previous_is_decided(self, services, submit, users):
        first = submit(users["student"])
        assert reject(services, first.id, LeaveStage.MENTOR).is_success

        second = submit(users["student"])
        assert second.id != first.id

    def test_multiple_pending_when_allowed(self, db_session, sequencer, users, leave_payload):
        from leave_approval.services.factory import build_services

        services = build_services(db_session, stage_sequencer=sequencer, allow_multiple_pending=True)
        first = services.leave_requests.create_leave_request(leave_payload(users["student"])).data
        second = services.leave_requests.create_leave_request(leave_payload(users["student"])).data

        current = services.leave_requests.get_current_for_student(users["student"].id).data
        assert {first.id, second.id} == {r.id for r in services.leave_requests.list_for_student(users["student"].id).data}
        assert current.id == second.id


class TestApprovalFlow:

    def test_day_scholar_full_approval(self, services, submit, users, db_session):
        leave = submit(users["student"])

        result = approve(services, leave.id, LeaveStage.MENTOR)
        assert result.data.current_stage == LeaveStage.HOD
        assert result.data.status == LeaveStatus.PENDING
        assert result.data.comments == "Approved by Mentor"
        assert result.data.final_artifact_ref is None

        result = approve(services, leave.id, LeaveStage.HOD)
        assert result.data.current_stage == LeaveStage.PRINCIPAL

        result = approve(services, leave.id, LeaveStage.PRINCIPAL)
        assert result.data.status == LeaveStatus.APPROVED
        assert result.data.comments == "Application approved"
        assert result.data.final_artifact_ref.startswith("data:image/png;base64,")
        assert result.data.current_stage == LeaveStage.PRINCIPAL

    def test_hostel_student_needs_warden(self, services, submit, users):
        leave = submit(users["hostel_student"])

        for stage in (LeaveStage.MENTOR, LeaveStage.HOD):
            assert approve(services, leave.id, stage).is_success

        result = approve(services, leave.id, LeaveStage.PRINCIPAL)
        assert result.data.status == LeaveStatus.PENDING
        assert result.data.current_stage == LeaveStage.WARDEN
        assert result.data.final_artifact_ref is None

        result = approve(services, leave.id, LeaveStage.WARDEN)
        assert result.data.status == LeaveStatus.APPROVED
        assert result.data.final_artifact_ref is not None

    def test_custom_comments_are_kept(self, services, submit, users):
        leave = submit(users["student"])
        result = approve(services, leave.id, LeaveStage.MENTOR, comments="Get well soon")
        assert result.data.comments == "Get well soon"

    def test_next_stage_approvers_are_notified(self, services, submit, users):
        leave = submit(users["student"])
        approve(services, leave.id, LeaveStage.MENTOR)

        hod_inbox = services.notifications.list_for_user(users["hod"].id).data
        assert [n.related_leave_id for n in hod_inbox] == [leave.id]
        assert services.notifications.list_for_user(users["hod_ece"].id).data == []

        student_inbox = services.notifications.list_for_user(users["student"].id).data
        assert len(student_inbox) == 1
        assert "awaiting HOD approval" in student_inbox[0].message

    def test_final_approval_notifies_student(self, services, submit, users):
        leave = submit(users["student"])
        for stage in (LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL):
            approve(services, leave.id, stage)

        latest = services.notifications.list_for_user(users["student"].id).data[0]
        assert "fully approved" in latest.message
        assert latest.notification_type.value == "success"

    def test_approval_history_is_recorded(self, services, submit, users):
        leave = submit(users["student"])
        approve(services, leave.id, LeaveStage.MENTOR, actor_id=users["mentor"].id)
        approve(services, leave.id, LeaveStage.HOD)

        history = services.leave_requests.get_approval_history(leave.id).data
        assert [h.stage for h in history] == [LeaveStage.MENTOR, LeaveStage.HOD]
        assert history[0].approver_id == users["mentor"].id
        assert history[0].approver_name == "Meera Iyer"
        assert history[1].approver_id is None
        assert history[1].approver_name == "HOD"


class TestRejection:

    def test_mentor_rejects_with_comments(self, services, submit, users):
        leave = submit(users["student"])

        result = reject(services, leave.id, LeaveStage.MENTOR, comments="Insufficient documentation")

        assert result.data.status == LeaveStatus.REJECTED
        assert result.data.comments == "Insufficient documentation"
        assert result.data.final_artifact_ref is not None
        assert result.data.current_stage == LeaveStage.MENTOR

        follow_up = approve(services, leave.id, LeaveStage.HOD)
        assert follow_up.is_state_conflict

    def test_rejection_default_comment(self, services, submit, users):
        leave = submit(users["student"])
        approve(services, leave.id, LeaveStage.MENTOR)

        result = reject(services, leave.id, LeaveStage.HOD)

        assert result.data.comments == "Application rejected"
        assert result.data.current_stage == LeaveStage.HOD

    def test_student_is_told_the_reason(self, services, submit, users):
        leave = submit(users["student"])
        reject(services, leave.id, LeaveStage.MENTOR, comments="Insufficient documentation")

        inbox = services.notifications.list_for_user(users["student"].id).data
        assert len(inbox) == 1
        assert "Insufficient documentation" in inbox[0].message
        assert inbox[0].notification_type.value == "error"


class TestStateConflicts:

    def test_acting_out_of_turn(self, services, submit, users, db_session):
        leave = submit(users["student"])

        result = approve(services, leave.id, LeaveStage.HOD)

        assert not result.is_success
        assert result.is_state_conflict
        assert result.message == "This leave request has already been processed"
        row = stored(db_session, leave.id)
        assert row.current_stage == LeaveStage.MENTOR
        assert row.status == LeaveStatus.PENDING
        assert services.leave_requests.get_approval_history(leave.id).data == []

    def test_double_submit_at_same_stage(self, services, submit, users):
        leave = submit(users["student"])
        assert approve(services, leave.id, LeaveStage.MENTOR).is_success

        second = approve(services, leave.id, LeaveStage.MENTOR)

        assert second.is_state_conflict
        assert services.leave_requests.get_leave_request(leave.id).data.current_stage == LeaveStage.HOD

    @pytest.mark.parametrize("final_action", [LeaveAction.APPROVE, LeaveAction.REJECT])
    @pytest.mark.parametrize("attempt", [LeaveAction.APPROVE, LeaveAction.REJECT])
    def test_terminal_requests_are_immutable(self, services, submit, users, final_action, attempt):
        leave = submit(users["student"])
        approve(services, leave.id, LeaveStage.MENTOR)
        approve(services, leave.id, LeaveStage.HOD)
        before = services.leave_requests.act(leave.id, LeaveStage.PRINCIPAL, final_action).data

        for stage in LeaveStage:
            result = services.leave_requests.act(leave.id, stage, attempt, comments="late")
            assert result.is_state_conflict

        after = services.leave_requests.get_leave_request(leave.id).data
        assert (after.status, after.current_stage, after.comments, after.final_artifact_ref) == (
            before.status, before.current_stage, before.comments, before.final_artifact_ref
        )

    def test_raise_for_error_exposes_typed_exception(self, services, submit, users):
        leave = submit(users["student"])
        with pytest.raises(StateConflictError):
            approve(services, leave.id, LeaveStage.PRINCIPAL).raise_for_error()

    def test_unknown_request_is_not_found(self, services, users):
        result = approve(services, "missing", LeaveStage.MENTOR)
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_invalid_stage_and_action_are_validation_errors(self, services, submit, users):
        leave = submit(users["student"])
        assert services.leave_requests.act(leave.id, "guardian", "approve").error.code == ErrorCode.VALIDATION_ERROR
        assert services.leave_requests.act(leave.id, "mentor", "escalate").error.code == ErrorCode.VALIDATION_ERROR


class TestActorVerification:

    def test_matching_role_may_act(self, services, submit, users):
        leave = submit(users["student"])
        result = approve(services, leave.id, LeaveStage.MENTOR, actor_id=users["mentor"].id)
        assert result.is_success

    def test_wrong_role_is_refused(self, services, submit, users, db_session):
        leave = submit(users["student"])

        result = approve(services, leave.id, LeaveStage.MENTOR, actor_id=users["principal"].id)

        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS
        assert stored(db_session, leave.id).current_stage == LeaveStage.MENTOR

    def test_admin_may_act_anywhere(self, services, submit, users):
        leave = submit(users["student"])
        result = reject(services, leave.id, LeaveStage.MENTOR, actor_id=users["admin"].id)
        assert result.data.status == LeaveStatus.REJECTED

    def test_unknown_actor_is_not_found(self, services, submit, users):
        leave = submit(users["student"])
        result = approve(services, leave.id, LeaveStage.MENTOR, actor_id="ghost")
        assert result.error.code == ErrorCode.NOT_FOUND


class TestInvariants:

    def test_stage_only_moves_forward(self, services, submit, users, sequencer):
        leave = submit(users["hostel_student"])
        sequence = sequencer.resolve_sequence(users["hostel_student"])
        seen = [leave.current_stage]

        for stage in sequence[:-1]:
            seen.append(approve(services, leave.id, stage).data.current_stage)

        assert seen == sequence

    def test_artifact_set_iff_terminal(self, services, submit, users, db_session):
        approved = submit(users["student"])
        for stage in (LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL):
            approve(services, approved.id, stage)
        rejected = submit(users["student"])
        reject(services, rejected.id, LeaveStage.MENTOR)
        pending = submit(users["hostel_student"])
        approve(services, pending.id, LeaveStage.MENTOR)

        db_session.expire_all()
        for row in db_session.query(LeaveRequest).all():
            assert (row.final_artifact_ref is not None) == (row.status != LeaveStatus.PENDING)

    def test_sequence_frozen_after_residency_change(self, services, submit, users, db_session):
        student = users["student"]
        leave = submit(student)

        services.users.update_user(student.id, {"hostel_resident": True})

        assert stored(db_session, leave.id).stage_sequence == ["mentor", "hod", "principal"]
        for stage in (LeaveStage.MENTOR, LeaveStage.HOD):
            approve(services, leave.id, stage)
        result = approve(services, leave.id, LeaveStage.PRINCIPAL)
        assert result.data.status == LeaveStatus.APPROVED


class TestQueries:

    def test_list_for_student_newest_first(self, services, submit, users):
        first = submit(users["student"])
        reject(services, first.id, LeaveStage.MENTOR)
        second = submit(users["student"])

        listed = services.leave_requests.list_for_student(users["student"].id).data
        assert [r.id for r in listed] == [second.id, first.id]

    def test_current_for_student(self, services, submit, users):
        assert services.leave_requests.get_current_for_student(users["student"].id).data is None

        leave = submit(users["student"])
        assert services.leave_requests.get_current_for_student(users["student"].id).data.id == leave.id

        reject(services, leave.id, LeaveStage.MENTOR)
        assert services.leave_requests.get_current_for_student(users["student"].id).data is None

    def test_pending_by_stage_and_department(self, services, submit, users):
        cse = submit(users["student"])
        mech = submit(users["orphan_student"])
        moved = submit(users["hostel_student"])
        approve(services, moved.id, LeaveStage.MENTOR)

        at_mentor = services.leave_requests.list_pending_by_stage(LeaveStage.MENTOR).data
        assert [r.id for r in at_mentor] == [cse.id, mech.id]

        cse_only = services.leave_requests.list_pending_by_stage("mentor", department="CSE").data
        assert [r.id for r in cse_only] == [cse.id]

        at_hod = services.leave_requests.list_pending_by_stage(LeaveStage.HOD, department="CSE").data
        assert [r.id for r in at_hod] == [moved.id]

    def test_list_all(self, services, submit, users):
        submit(users["student"])
        submit(users["hostel_student"])
        assert len(services.leave_requests.list_all().data) == 2

    def test_verify_pass(self, services, submit, users):
        leave = submit(users["student"])
        pending_view = services.leave_requests.verify_pass(leave.id).data
        assert pending_view.is_valid is False

        for stage in (LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL):
            approve(services, leave.id, stage)

        view = services.leave_requests.verify_pass(leave.id).data
        assert view.is_valid is True
        assert view.student_name == "Asha Rao"
        assert view.roll_number == "21CS042"
        assert len(view.approvals) == 3

    def test_zero_approvers_does_not_block_creation(self, services, submit, users):
        leave = submit(users["orphan_student"])

        assert leave.current_stage == LeaveStage.MENTOR
        result = approve(services, leave.id, LeaveStage.MENTOR, actor_id=users["admin"].id)
        assert result.data.current_stage == LeaveStage.HOD
