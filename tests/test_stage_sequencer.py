from types import SimpleNamespace

import pytest

from leave_approval.core.exceptions import ConfigurationError, InternalConsistencyError
from leave_approval.models.base.enums import LeaveStage
from leave_approval.services.leave.stage_sequencer import StageSequencer

MENTOR, HOD, PRINCIPAL, WARDEN = (
    LeaveStage.MENTOR,
    LeaveStage.HOD,
    LeaveStage.PRINCIPAL,
    LeaveStage.WARDEN,
)


def test_day_scholar_gets_base_stages(sequencer):
    student = SimpleNamespace(hostel_resident=False)
    assert sequencer.resolve_sequence(student) == [MENTOR, HOD, PRINCIPAL]


def test_hostel_resident_gets_warden_appended(sequencer):
    student = SimpleNamespace(hostel_resident=True)
    assert sequencer.resolve_sequence(student) == [MENTOR, HOD, PRINCIPAL, WARDEN]


def test_next_stage_walks_sequence_in_order(sequencer):
    sequence = [MENTOR, HOD, PRINCIPAL, WARDEN]

    assert sequencer.next_stage(sequence, MENTOR).next_stage == HOD
    assert sequencer.next_stage(sequence, HOD).next_stage == PRINCIPAL
    assert sequencer.next_stage(sequence, PRINCIPAL).next_stage == WARDEN

    last = sequencer.next_stage(sequence, WARDEN)
    assert last.next_stage is None
    assert last.is_final


def test_principal_is_final_for_day_scholars(sequencer):
    assert sequencer.next_stage([MENTOR, HOD, PRINCIPAL], PRINCIPAL).is_final


def test_stage_outside_sequence_is_internal_error(sequencer):
    with pytest.raises(InternalConsistencyError):
        sequencer.next_stage([MENTOR, HOD, PRINCIPAL], WARDEN)


def test_sequence_for_prefers_stored_sequence(sequencer):
    request = SimpleNamespace(id="r1", stage_sequence=["mentor", "hod"], is_hostel_student=True)
    assert sequencer.sequence_for(request) == [MENTOR, HOD]


def test_sequence_for_rederives_from_residency_flag(sequencer):
    request = SimpleNamespace(id="r1", stage_sequence=[], is_hostel_student=True)
    assert sequencer.sequence_for(request) == [MENTOR, HOD, PRINCIPAL, WARDEN]


def test_sequence_for_rejects_unknown_stage(sequencer):
    request = SimpleNamespace(id="r1", stage_sequence=["mentor", "guardian"], is_hostel_student=False)
    with pytest.raises(InternalConsistencyError):
        sequencer.sequence_for(request)


def test_has_reached():
    sequence = [MENTOR, HOD, PRINCIPAL]
    assert StageSequencer.has_reached(sequence, HOD, MENTOR)
    assert StageSequencer.has_reached(sequence, HOD, HOD)
    assert not StageSequencer.has_reached(sequence, HOD, PRINCIPAL)
    assert not StageSequencer.has_reached(sequence, HOD, WARDEN)


def test_empty_base_stages_is_configuration_error():
    with pytest.raises(ConfigurationError):
        StageSequencer(base_stages=[], hostel_stages=[WARDEN])


def test_overlapping_stages_is_configuration_error():
    with pytest.raises(ConfigurationError):
        StageSequencer(base_stages=[MENTOR, HOD], hostel_stages=[HOD])


def test_defaults_come_from_settings():
    sequencer = StageSequencer()
    assert sequencer.base_stages == [MENTOR, HOD, PRINCIPAL]
    assert sequencer.hostel_stages == [WARDEN]
