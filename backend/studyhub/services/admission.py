"""Membership Admission Controller: serialized, transactional group joins.

Invariants:
    - The existence, uniqueness and capacity predicates and the insert run in
      one transaction that holds the group's lock from the first read to commit
    - The lock is scoped to one group row (PostgreSQL SELECT ... FOR UPDATE);
      joins on other groups never wait on it. SQLite falls back to BEGIN IMMEDIATE
    - A rejected or failed attempt leaves no rows behind (rollback)
    - An id outside the storable range is a terminal not_found, never a
      retryable storage failure
    - After an admission, count(members) <= max_members still holds
    - Transient storage failures surface as retryable DatabaseError

Design Decisions:
    - Block on the lock rather than retry optimistically: joins are rare and
      latency-insensitive, the wait is bounded by the lock timeout
    - Decision logic lives in core/admission.py (pure); this class only does IO
"""

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.core.admission import AdmissionSnapshot, decide_admission, rejection_error
from studyhub.core.domain_types import (
    AdmissionOutcome, GroupId, MemberRole, UserId, is_storable_id,
)
from studyhub.core.errors import DatabaseError, ErrorContext
from studyhub.infrastructure.database import begin_write_locked
from studyhub.models.group import Group, GroupMember

logger = logging.getLogger(__name__)

NO_GROUP = AdmissionSnapshot(
    group_exists=False, already_member=False, member_count=0, max_members=0,
)


def lock_group_query(group_id: GroupId) -> Select:
    """Capacity row of one group, locked until the transaction ends."""
    return (
        select(Group.id, Group.max_members)
        .where(Group.id == group_id)
        .with_for_update()
    )


class MembershipAdmissionController:
    """Decides and records a single user's attempt to join a group."""

    def __init__(self, db: AsyncSession, lock_timeout: float = 5.0):
        self.db = db
        self.lock_timeout = lock_timeout

    async def join(self, group_id: GroupId, user_id: UserId) -> AdmissionOutcome:
        """Admit user_id into group_id or raise the rejection/failure."""
        log_extra = {"group_id": group_id, "user_id": user_id}
        try:
            outcome, snapshot = await self._admit(group_id, user_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(
                f"Join failed, rolled back: {type(e).__name__}",
                extra={**log_extra, "outcome": AdmissionOutcome.FAILED.value},
            )
            raise DatabaseError(
                "Could not complete join, safe to retry", "admission",
                ErrorContext(user_id=user_id, group_id=group_id),
            )

        logger.info(
            f"Join {outcome.value}",
            extra={**log_extra, "outcome": outcome.value},
        )
        if outcome is not AdmissionOutcome.ADMITTED:
            raise rejection_error(outcome, snapshot, group_id, user_id)
        return outcome

    async def _admit(
        self, group_id: GroupId, user_id: UserId,
    ) -> tuple[AdmissionOutcome, AdmissionSnapshot]:
        await begin_write_locked(self.db, self.lock_timeout)
        snapshot = await self._read_snapshot(group_id, user_id)
        outcome = decide_admission(snapshot)
        if outcome is not AdmissionOutcome.ADMITTED:
            await self.db.rollback()
            return outcome, snapshot

        self.db.add(GroupMember(
            group_id=group_id, user_id=user_id, role=MemberRole.MEMBER.value,
        ))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # only reachable when the backend did not honour the lock
            if await self._is_member(group_id, user_id):
                return AdmissionOutcome.ALREADY_MEMBER, snapshot
            raise
        return outcome, snapshot

    async def _read_snapshot(self, group_id: GroupId, user_id: UserId) -> AdmissionSnapshot:
        """Lock the group row, then read membership state behind the lock."""
        if not is_storable_id(group_id):
            return NO_GROUP
        group = (await self.db.execute(lock_group_query(group_id))).one_or_none()
        if group is None:
            return NO_GROUP

        count = await self.db.scalar(
            select(func.count())
            .select_from(GroupMember)
            .where(GroupMember.group_id == group_id)
        )
        return AdmissionSnapshot(
            group_exists=True,
            already_member=await self._is_member(group_id, user_id),
            member_count=count or 0,
            max_members=group.max_members,
        )

    async def _is_member(self, group_id: GroupId, user_id: UserId) -> bool:
        result = await self.db.execute(
            select(GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .where(GroupMember.user_id == user_id)
        )
        return result.first() is not None
