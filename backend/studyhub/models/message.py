"""GroupMessage ORM: append-only chat log per group.

Invariants:
    - Rows are inserted, never updated or deleted by the API
    - Read order is sent_at ascending, id ascending for equal timestamps
"""

from datetime import datetime, timezone

from sqlalchemy import Text, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.db.base import Base


class GroupMessage(Base):
    __tablename__ = "group_messages"
    __table_args__ = (
        Index("ix_group_messages_group_sent", "group_id", "sent_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("study_groups.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
