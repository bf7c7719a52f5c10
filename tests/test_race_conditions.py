"""
Concurrent decisions on one request over a file-backed database, using
independent sessions interleaved in turn or racing on separate threads.
"""

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leave_approval.db.init_db import init_db
from leave_approval.models.base.enums import LeaveAction, LeaveStage, LeaveStatus
from leave_approval.models.leave.leave_approval import LeaveApproval
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.services.base.service_result import ErrorCode
from leave_approval.services.factory import build_services
from leave_approval.services.leave.stage_sequencer import StageSequencer

from tests.helpers import seed_users


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def make_session(file_engine):
    factory = sessionmaker(bind=file_engine, autoflush=False)
    sessions = []

    def _make():
        session = factory()
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.close()


@pytest.fixture
def race_setup(make_session):
    sequencer = StageSequencer([LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL], [LeaveStage.WARDEN])
    seed_session = make_session()
    users = seed_users(seed_session)
    services = build_services(seed_session, stage_sequencer=sequencer)
    leave = services.leave_requests.create_leave_request({
        "student_id": users["student"].id,
        "reason": "Medical",
        "start_date": "2024-01-15",
        "end_date": "2024-01-16",
    }).data
    return sequencer, leave.id


def test_stale_second_approver_gets_state_conflict(make_session, race_setup):
    sequencer, leave_id = race_setup
    session_a, session_b = make_session(), make_session()
    services_a = build_services(session_a, stage_sequencer=sequencer)
    services_b = build_services(session_b, stage_sequencer=sequencer)

    # Both approvers have the request loaded at the mentor stage
    assert session_a.get(LeaveRequest, leave_id).current_stage == LeaveStage.MENTOR
    assert session_b.get(LeaveRequest, leave_id).current_stage == LeaveStage.MENTOR

    first = services_a.leave_requests.act(leave_id, LeaveStage.MENTOR, LeaveAction.APPROVE)
    second = services_b.leave_requests.act(leave_id, LeaveStage.MENTOR, LeaveAction.APPROVE)

    assert first.is_success
    assert second.is_state_conflict

    check = make_session()
    row = check.get(LeaveRequest, leave_id)
    assert row.current_stage == LeaveStage.HOD
    assert row.status == LeaveStatus.PENDING
    assert check.query(LeaveApproval).filter_by(leave_id=leave_id).count() == 1


def test_stale_reject_loses_to_approve(make_session, race_setup):
    sequencer, leave_id = race_setup
    session_a, session_b = make_session(), make_session()
    services_a = build_services(session_a, stage_sequencer=sequencer)
    services_b = build_services(session_b, stage_sequencer=sequencer)
    session_b.get(LeaveRequest, leave_id)

    assert services_a.leave_requests.act(leave_id, LeaveStage.MENTOR, LeaveAction.APPROVE).is_success
    rejected = services_b.leave_requests.act(leave_id, LeaveStage.MENTOR, LeaveAction.REJECT, comments="No")

    assert rejected.is_state_conflict
    row = make_session().get(LeaveRequest, leave_id)
    assert row.status == LeaveStatus.PENDING
    assert row.final_artifact_ref is None



def test_concurrent_approvals_have_exactly_one_winner(make_session, race_setup):
    sequencer, leave_id = race_setup
    workers = 8
    sessions = [make_session() for _ in range(workers)]
    barrier = threading.Barrier(workers)
    outcomes = []
    lock = threading.Lock()

    def approve(session):
        services = build_services(session, stage_sequencer=sequencer)
        barrier.wait()
        result = services.leave_requests.act(leave_id, LeaveStage.MENTOR, LeaveAction.APPROVE)
        with lock:
            outcomes.append("ok" if result.is_success else result.error.code)

    threads = [threading.Thread(target=approve, args=(session,)) for session in sessions]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert len(outcomes) == workers
    assert outcomes.count("ok") == 1
    assert outcomes.count(ErrorCode.STATE_CONFLICT) == workers - 1

    check = make_session()
    assert check.get(LeaveRequest, leave_id).current_stage == LeaveStage.HOD
    assert check.query(LeaveApproval).filter_by(leave_id=leave_id).count() == 1
