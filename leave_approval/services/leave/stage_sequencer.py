"""
Stage sequencing for leave approval.

Computes the ordered list of approval stages a request passes through
and the successor of a given stage. The sequence is plain data: it is
resolved once at creation, stored on the request, and read back from
there for every later transition.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from leave_approval.config.settings import settings
from leave_approval.core.exceptions import ConfigurationError, InternalConsistencyError
from leave_approval.models.base.enums import LeaveStage

__all__ = ["StageSequencer", "StageTransition"]


@dataclass(frozen=True)
class StageTransition:
    """Outcome of approving at `current`: the next stage, or none when final."""

    current: LeaveStage
    next_stage: Optional[LeaveStage]

    @property
    def is_final(self) -> bool:
        return self.next_stage is None


class StageSequencer:
    """
    Resolves stage sequences and successor stages.

    Every request goes through `base_stages` in order; hostel residents
    additionally go through `hostel_stages`, appended at the end.
    Both lists default to the configured workflow.
    """

    def __init__(
        self,
        base_stages: Optional[Sequence[LeaveStage]] = None,
        hostel_stages: Optional[Sequence[LeaveStage]] = None,
    ):
        self.base_stages: List[LeaveStage] = list(
            base_stages if base_stages is not None else settings.get_base_stages()
        )
        self.hostel_stages: List[LeaveStage] = list(
            hostel_stages if hostel_stages is not None else settings.get_hostel_stages()
        )

        if not self.base_stages:
            raise ConfigurationError(
                "At least one base approval stage is required",
                config_key="LEAVE_BASE_STAGES",
            )
        overlap = set(self.base_stages) & set(self.hostel_stages)
        if overlap:
            raise ConfigurationError(
                "Hostel stages must not repeat base stages: "
                + ", ".join(sorted(stage.value for stage in overlap)),
                config_key="LEAVE_HOSTEL_STAGES",
            )

    def resolve_sequence(self, student) -> List[LeaveStage]:
        """Stage sequence for a student, based on hostel residency."""
        return self.sequence_for_residency(bool(student.hostel_resident))

    def sequence_for_residency(self, hostel_resident: bool) -> List[LeaveStage]:
        stages = list(self.base_stages)
        if hostel_resident:
            stages.extend(self.hostel_stages)
        return stages

    def sequence_for(self, leave_request) -> List[LeaveStage]:
        """
        Frozen sequence stored on a request.

        Rows without a stored sequence are re-derived from the residency
        flag captured at creation, never from the student's current profile.
        """
        stored = leave_request.stage_sequence or []
        if not stored:
            return self.sequence_for_residency(bool(leave_request.is_hostel_student))

        try:
            return [LeaveStage(stage) for stage in stored]
        except ValueError as e:
            raise InternalConsistencyError(
                "Leave request carries an unknown approval stage",
                {"leave_id": leave_request.id, "stage_sequence": list(stored)},
            ) from e

    def next_stage(self, sequence: Sequence[LeaveStage], current: LeaveStage) -> StageTransition:
        """
        Successor of `current` within `sequence`.

        Raises:
            InternalConsistencyError: If `current` is not part of `sequence`
        """
        try:
            index = list(sequence).index(current)
        except ValueError as e:
            raise InternalConsistencyError(
                f"Stage '{current.value}' is not part of the request's approval sequence",
                {"stage": current.value, "sequence": [stage.value for stage in sequence]},
            ) from e

        if index + 1 >= len(sequence):
            return StageTransition(current=current, next_stage=None)
        return StageTransition(current=current, next_stage=sequence[index + 1])

    @staticmethod
    def has_reached(sequence: Sequence[LeaveStage], current: LeaveStage, stage: LeaveStage) -> bool:
        """Whether a request sitting at `current` has reached `stage`."""
        sequence = list(sequence)
        if stage not in sequence or current not in sequence:
            return False
        return sequence.index(stage) <= sequence.index(current)
