"""Admission Decision: pure evaluation of the three join predicates.

Invariants:
    - Predicates are checked in order: existence, uniqueness, capacity
    - ADMITTED only when member_count < max_members, so admitting keeps
      member_count <= max_members
    - No IO: the caller supplies a snapshot read under the group lock

Design Decisions:
    - Uniqueness is checked before capacity: a member re-joining a full group
      is told they are already a member, not that the group is full
"""

from dataclasses import dataclass

from studyhub.core.domain_types import AdmissionOutcome
from studyhub.core.errors import (
    AlreadyMemberError, ErrorContext, GroupFullError, ResourceNotFoundError,
    StudyHubError,
)


@dataclass(frozen=True)
class AdmissionSnapshot:
    """Group state as observed inside the locked unit of work."""
    group_exists: bool
    already_member: bool
    member_count: int
    max_members: int


def decide_admission(snapshot: AdmissionSnapshot) -> AdmissionOutcome:
    """Return the outcome of a join attempt against a consistent snapshot."""
    if not snapshot.group_exists:
        return AdmissionOutcome.NOT_FOUND
    if snapshot.already_member:
        return AdmissionOutcome.ALREADY_MEMBER
    if snapshot.member_count >= snapshot.max_members:
        return AdmissionOutcome.FULL
    return AdmissionOutcome.ADMITTED


def rejection_error(
    outcome: AdmissionOutcome,
    snapshot: AdmissionSnapshot,
    group_id: int,
    user_id: int,
) -> StudyHubError:
    """Map a rejecting outcome to the error reported to the caller."""
    ctx = ErrorContext(user_id=user_id, group_id=group_id)
    if outcome is AdmissionOutcome.NOT_FOUND:
        return ResourceNotFoundError("Group", group_id, ctx)
    if outcome is AdmissionOutcome.ALREADY_MEMBER:
        return AlreadyMemberError(ctx)
    if outcome is AdmissionOutcome.FULL:
        return GroupFullError(snapshot.max_members, ctx)
    raise ValueError(f"{outcome.value} is not a rejection")
