"""Group Registry: create study groups, list them, list their members.

Invariants:
    - create_group writes the group and the owner's membership in one
      transaction: either both are visible or neither is
    - Listing is newest first (created_at desc, id desc for ties)
    - member_count is computed live from group_members, never cached
    - A group id outside the storable range is NotFound without a query

Design Decisions:
    - group_summary_query() shared with the match engine so both views
      annotate groups identically
"""

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from studyhub.core.domain_types import GroupId, MemberRole, UserId, is_storable_id
from studyhub.core.errors import ErrorContext, ResourceNotFoundError
from studyhub.models.group import Group, GroupMember
from studyhub.models.subject import Subject
from studyhub.models.user import User
from studyhub.schemas.group import GroupCreate

logger = logging.getLogger(__name__)


def group_summary_query() -> Select:
    """Groups joined with subject name, owner name and live member count."""
    owner = aliased(User)
    member_count = (
        select(func.count())
        .select_from(GroupMember)
        .where(GroupMember.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )
    return (
        select(
            Group,
            Subject.name.label("subject_name"),
            owner.display_name.label("owner_name"),
            member_count.label("member_count"),
        )
        .join(Subject, Subject.id == Group.subject_id)
        .join(owner, owner.id == Group.owner_id)
        .order_by(Group.created_at.desc(), Group.id.desc())
    )


def summary_row_to_dict(row) -> dict:
    group, subject_name, owner_name, member_count = row
    return {
        "id": group.id,
        "title": group.title,
        "subject_id": group.subject_id,
        "subject_name": subject_name,
        "description": group.description,
        "owner_id": group.owner_id,
        "owner_name": owner_name,
        "level": group.level,
        "max_members": group.max_members,
        "member_count": member_count,
        "created_at": group.created_at,
    }


class GroupRegistry:
    """Owns group rows and their owner seat."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_group(self, owner_id: UserId, data: GroupCreate) -> Group:
        if await self.db.get(Subject, data.subject_id) is None:
            raise ResourceNotFoundError("Subject", data.subject_id)

        group = Group(
            title=data.title,
            subject_id=data.subject_id,
            description=data.description or "",
            owner_id=owner_id,
            level=data.level.value,
            max_members=data.max_members,
        )
        try:
            self.db.add(group)
            await self.db.flush()
            self.db.add(GroupMember(
                group_id=group.id, user_id=owner_id, role=MemberRole.OWNER.value,
            ))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Group created: {group.title}",
            extra={"group_id": group.id, "user_id": owner_id},
        )
        return group

    async def list_groups(self) -> list[dict]:
        result = await self.db.execute(group_summary_query())
        return [summary_row_to_dict(row) for row in result.all()]

    async def require_group(self, group_id: GroupId, user_id: UserId | None = None) -> Group:
        group = await self.db.get(Group, group_id) if is_storable_id(group_id) else None
        if group is None:
            raise ResourceNotFoundError(
                "Group", group_id, ErrorContext(user_id=user_id, group_id=group_id),
            )
        return group

    async def is_member(self, group_id: GroupId, user_id: UserId) -> bool:
        result = await self.db.execute(
            select(GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .where(GroupMember.user_id == user_id)
        )
        return result.first() is not None

    async def get_members(self, group_id: GroupId) -> list[dict]:
        """Members with display names, owner first then join order."""
        await self.require_group(group_id)
        owner_first = (GroupMember.role != MemberRole.OWNER.value)
        result = await self.db.execute(
            select(GroupMember.user_id, User.display_name, GroupMember.role)
            .join(User, User.id == GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .order_by(owner_first, GroupMember.joined_at, GroupMember.user_id)
        )
        return [
            {"user_id": uid, "display_name": name, "role": role}
            for uid, name, role in result.all()
        ]
