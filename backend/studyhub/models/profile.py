"""Profile and UserSubject ORM: per-user preferences.

Invariants:
    - Profile is 1:1 with User (user_id is the primary key)
    - Profile upserts overwrite bio, location and availability together
    - UserSubject has composite key (user_id, subject_id); upsert overwrites level
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.db.base import Base


class Profile(Base):
    """Free-text profile. No history retained."""
    __tablename__ = "profiles"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(255), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class UserSubject(Base):
    """A subject the user studies, with their self-assessed level."""
    __tablename__ = "user_subjects"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    subject_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subjects.id"), primary_key=True,
    )
    level: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
