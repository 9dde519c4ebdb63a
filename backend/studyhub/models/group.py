"""Group and GroupMember ORM: capacity-bounded study groups and their seats.

Invariants:
    - max_members >= 1 (CHECK constraint); the owner always holds one seat
    - (group_id, user_id) is the primary key of group_members: a user belongs
      to a group at most once
    - count(group_members for G) <= G.max_members, enforced by the admission
      controller under a row lock on the group
    - Groups are never edited or deleted by the API

Design Decisions:
    - Table named study_groups: "groups" is reserved in MySQL 8 and awkward elsewhere
    - No member_count column: counting under the group lock is the source of truth
"""

from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, DateTime, ForeignKey, CheckConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.core.domain_types import DEFAULT_MAX_MEMBERS, GroupLevel, MemberRole
from studyhub.db.base import Base


class Group(Base):
    """Study group owned by the user who created it."""
    __tablename__ = "study_groups"
    __table_args__ = (
        CheckConstraint("max_members >= 1", name="ck_study_groups_max_members_positive"),
        Index("ix_study_groups_subject_created", "subject_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subjects.id"), nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False,
    )
    level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GroupLevel.MIXED.value,
    )
    max_members: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_MAX_MEMBERS,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class GroupMember(Base):
    """One seat in a group."""
    __tablename__ = "group_members"

    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("study_groups.id", ondelete="CASCADE"), primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MemberRole.MEMBER.value,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
