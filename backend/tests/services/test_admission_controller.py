"""Membership Admission Controller: capacity and uniqueness under concurrent joins.

Invariants:
    - N+1 concurrent joiners against N free seats -> exactly N admitted, 1 full
    - The same user joining concurrently is admitted once
    - Rejections and transient failures leave no membership rows behind

Design Decisions:
    - Joins run through the controller on independent sessions (one connection
      each), the way concurrent requests would
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from studyhub.core.domain_types import AdmissionOutcome, MemberRole
from studyhub.core.errors import (
    AlreadyMemberError, DatabaseError, GroupFullError, ResourceNotFoundError,
)
from studyhub.infrastructure.database import begin_write_locked
from studyhub.models.group import Group, GroupMember
from studyhub.models.user import User
from studyhub.services.admission import MembershipAdmissionController, lock_group_query


async def _seed_users(db_manager, count: int) -> list[int]:
    async with db_manager.session() as db:
        users = [
            User(email=f"user{i}@example.com", password_hash="x", display_name=f"User {i}")
            for i in range(count)
        ]
        db.add_all(users)
        await db.commit()
        return [u.id for u in users]


async def _seed_group(db_manager, owner_id: int, subject_id: int, max_members: int) -> int:
    async with db_manager.session() as db:
        group = Group(
            title="Seats", subject_id=subject_id, owner_id=owner_id,
            max_members=max_members,
        )
        db.add(group)
        await db.flush()
        db.add(GroupMember(group_id=group.id, user_id=owner_id, role=MemberRole.OWNER.value))
        await db.commit()
        return group.id


async def _member_count(db_manager, group_id: int) -> int:
    async with db_manager.session() as db:
        return await db.scalar(
            select(func.count()).select_from(GroupMember)
            .where(GroupMember.group_id == group_id)
        )


async def _attempt(db_manager, group_id: int, user_id: int) -> AdmissionOutcome:
    async with db_manager.session() as db:
        controller = MembershipAdmissionController(db, lock_timeout=15.0)
        try:
            return await controller.join(group_id, user_id)
        except GroupFullError:
            return AdmissionOutcome.FULL
        except AlreadyMemberError:
            return AdmissionOutcome.ALREADY_MEMBER


@pytest.mark.parametrize("free_seats", [0, 1, 5])
async def test_concurrent_joins_fill_exactly_the_free_seats(db_manager, subjects, free_seats):
    owner, *joiners = await _seed_users(db_manager, free_seats + 2)
    group_id = await _seed_group(
        db_manager, owner, subjects["Physics"], max_members=free_seats + 1,
    )

    outcomes = await asyncio.gather(*(
        _attempt(db_manager, group_id, uid) for uid in joiners
    ))

    assert outcomes.count(AdmissionOutcome.ADMITTED) == free_seats
    assert outcomes.count(AdmissionOutcome.FULL) == 1
    assert await _member_count(db_manager, group_id) == free_seats + 1


async def test_same_user_concurrent_joins_admitted_once(db_manager, subjects):
    owner, joiner = await _seed_users(db_manager, 2)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=10)

    outcomes = await asyncio.gather(*(
        _attempt(db_manager, group_id, joiner) for _ in range(4)
    ))

    assert outcomes.count(AdmissionOutcome.ADMITTED) == 1
    assert outcomes.count(AdmissionOutcome.ALREADY_MEMBER) == 3
    assert await _member_count(db_manager, group_id) == 2


async def test_sequential_duplicate_join_is_rejected(db_manager, subjects):
    owner, joiner = await _seed_users(db_manager, 2)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=10)

    assert await _attempt(db_manager, group_id, joiner) is AdmissionOutcome.ADMITTED
    assert await _attempt(db_manager, group_id, joiner) is AdmissionOutcome.ALREADY_MEMBER


async def test_owner_cannot_join_own_group_again(db_manager, subjects):
    (owner,) = await _seed_users(db_manager, 1)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=3)

    assert await _attempt(db_manager, group_id, owner) is AdmissionOutcome.ALREADY_MEMBER


async def test_owner_occupying_only_seat_makes_group_full(db_manager, subjects):
    owner, joiner = await _seed_users(db_manager, 2)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=1)

    assert await _attempt(db_manager, group_id, joiner) is AdmissionOutcome.FULL
    assert await _member_count(db_manager, group_id) == 1


async def test_unknown_group_raises_not_found(db_manager):
    (user,) = await _seed_users(db_manager, 1)
    async with db_manager.session() as db:
        with pytest.raises(ResourceNotFoundError):
            await MembershipAdmissionController(db).join(999, user)


async def test_admitted_member_gets_member_role(db_manager, subjects):
    owner, joiner = await _seed_users(db_manager, 2)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=5)

    await _attempt(db_manager, group_id, joiner)

    async with db_manager.session() as db:
        member = await db.get(GroupMember, (group_id, joiner))
        assert member.role == MemberRole.MEMBER.value


async def test_transient_failure_rolls_back_and_is_retryable(db_manager, subjects):
    owner, joiner = await _seed_users(db_manager, 2)
    group_id = await _seed_group(db_manager, owner, subjects["Physics"], max_members=5)

    async with db_manager.session() as db:
        controller = MembershipAdmissionController(db)

        async def lock_timeout(*args):
            raise OperationalError("SELECT ... FOR UPDATE", {}, Exception("lock timeout"))

        controller._read_snapshot = lock_timeout
        with pytest.raises(DatabaseError) as exc:
            await controller.join(group_id, joiner)

    assert exc.value.context.retryable is True
    assert exc.value.context.group_id == group_id
    assert await _member_count(db_manager, group_id) == 1
    # a retry after the failure succeeds
    assert await _attempt(db_manager, group_id, joiner) is AdmissionOutcome.ADMITTED


async def test_locked_unit_requires_fresh_session(db_manager):
    async with db_manager.session() as db:
        await db.execute(select(1))
        with pytest.raises(RuntimeError):
            await begin_write_locked(db, 1.0)


async def test_out_of_range_group_is_terminal_not_found(db_manager):
    (user,) = await _seed_users(db_manager, 1)
    async with db_manager.session() as db:
        with pytest.raises(ResourceNotFoundError) as exc:
            await MembershipAdmissionController(db).join(2**31, user)
    assert exc.value.context.retryable is False


# --- PostgreSQL lock path ---------------------------------------------------------

def test_group_lock_query_is_select_for_update_on_postgres():
    sql = str(lock_group_query(7).compile(dialect=postgresql.dialect()))
    assert "FROM study_groups" in sql
    assert sql.rstrip().endswith("FOR UPDATE")


class _RecordingConnection:
    def __init__(self, dialect_name: str):
        self.dialect = type("Dialect", (), {"name": dialect_name})()
        self.statements: list[str] = []

    async def execute(self, statement):
        self.statements.append(str(statement))


class _FreshSession:
    def __init__(self, conn: _RecordingConnection):
        self.conn = conn
        self.execution_options = None

    def in_transaction(self) -> bool:
        return False

    async def connection(self, execution_options=None):
        self.execution_options = execution_options
        return self.conn


async def test_locked_unit_bounds_lock_wait_on_postgres():
    conn = _RecordingConnection("postgresql")
    session = _FreshSession(conn)

    await begin_write_locked(session, 2.5)

    assert conn.statements == ["SET LOCAL lock_timeout = '2500ms'"]
    assert session.execution_options == {"studyhub_begin_immediate": True}


async def test_locked_unit_sets_no_lock_timeout_on_sqlite():
    conn = _RecordingConnection("sqlite")
    await begin_write_locked(_FreshSession(conn), 2.5)
    assert conn.statements == []
