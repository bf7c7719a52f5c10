from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leave_approval.db.init_db import drop_db, init_db
from leave_approval.models.base.enums import LeaveStage
from leave_approval.services.factory import build_services
from leave_approval.services.leave.stage_sequencer import StageSequencer

from tests.helpers import seed_users


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db_session):
    return seed_users(db_session)


@pytest.fixture
def sequencer():
    return StageSequencer(
        base_stages=[LeaveStage.MENTOR, LeaveStage.HOD, LeaveStage.PRINCIPAL],
        hostel_stages=[LeaveStage.WARDEN],
    )


@pytest.fixture
def services(db_session, sequencer):
    return build_services(db_session, stage_sequencer=sequencer, allow_multiple_pending=False)


@pytest.fixture
def leave_payload():
    def _payload(student, **overrides):
        data = {
            "student_id": student.id,
            "leave_type": "medical",
            "reason": "Medical",
            "start_date": date(2024, 1, 15),
            "end_date": date(2024, 1, 16),
        }
        data.update(overrides)
        return data

    return _payload


@pytest.fixture
def submit(services, leave_payload):
    """Create a leave request and return its response, failing loudly otherwise."""

    def _submit(student, **overrides):
        result = services.leave_requests.create_leave_request(leave_payload(student, **overrides))
        assert result.is_success, result.error
        return result.data

    return _submit
