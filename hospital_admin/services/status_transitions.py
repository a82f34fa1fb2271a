# hospital_admin/services/status_transitions.py
"""
Allowed status changes for records that move through a lifecycle.

Terminal states (completed, cancelled, ...) have no outgoing edges, so a
finished visit cannot be silently reopened by a later update.
"""

from enum import Enum
from typing import Mapping, TypeVar

from hospital_admin.models.appointment import VisitStatus
from hospital_admin.models.lab_request import LabTestStatus

StatusT = TypeVar("StatusT", bound=Enum)


class InvalidStatusTransitionError(Exception):
    pass


VISIT_TRANSITIONS: dict[VisitStatus, frozenset[VisitStatus]] = {
    VisitStatus.PENDING: frozenset(
        {VisitStatus.IN_PROGRESS, VisitStatus.COMPLETED, VisitStatus.CANCELLED}
    ),
    VisitStatus.IN_PROGRESS: frozenset({VisitStatus.COMPLETED, VisitStatus.CANCELLED}),
    VisitStatus.COMPLETED: frozenset(),
    VisitStatus.CANCELLED: frozenset(),
}

LAB_TRANSITIONS: dict[LabTestStatus, frozenset[LabTestStatus]] = {
    LabTestStatus.REQUESTED: frozenset(
        {LabTestStatus.PAID, LabTestStatus.IN_PROGRESS, LabTestStatus.CANCELLED}
    ),
    LabTestStatus.PAID: frozenset({LabTestStatus.IN_PROGRESS, LabTestStatus.CANCELLED}),
    LabTestStatus.IN_PROGRESS: frozenset({LabTestStatus.COMPLETED, LabTestStatus.CANCELLED}),
    LabTestStatus.COMPLETED: frozenset(),
    LabTestStatus.CANCELLED: frozenset(),
}


def is_terminal(transitions: Mapping[StatusT, frozenset[StatusT]], status: StatusT) -> bool:
    return not transitions.get(status)


def ensure_transition(
    transitions: Mapping[StatusT, frozenset[StatusT]],
    current: StatusT,
    new: StatusT,
    *,
    label: str,
) -> None:
    """Raise InvalidStatusTransitionError unless current -> new is allowed."""
    if current == new:
        raise InvalidStatusTransitionError(f"{label} is already {current.value}.")
    if is_terminal(transitions, current):
        raise InvalidStatusTransitionError(
            f"{label} is already {current.value}. No further status changes are allowed."
        )
    if new not in transitions[current]:
        raise InvalidStatusTransitionError(
            f"{label} cannot move from {current.value} to {new.value}."
        )
