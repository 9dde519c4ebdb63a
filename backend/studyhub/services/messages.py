"""Message Log: append-only per-group chat messages.

Invariants:
    - Empty or whitespace-only messages are rejected before any write
    - Posting requires membership unless require_membership is disabled
    - list_messages returns the first MESSAGE_PAGE_LIMIT messages in
      chronological order (sent_at asc, id asc)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.core.domain_types import MESSAGE_PAGE_LIMIT, GroupId, UserId
from studyhub.core.errors import ErrorContext, InputValidationError, NotGroupMemberError
from studyhub.models.message import GroupMessage
from studyhub.models.user import User
from studyhub.services.groups import GroupRegistry

logger = logging.getLogger(__name__)


class MessageLog:
    def __init__(self, db: AsyncSession, require_membership: bool = True):
        self.db = db
        self.require_membership = require_membership
        self.groups = GroupRegistry(db)

    async def post_message(self, group_id: GroupId, user_id: UserId, text: str) -> GroupMessage:
        if not text or not text.strip():
            raise InputValidationError("Empty message", "message")
        await self.groups.require_group(group_id, user_id)
        if self.require_membership and not await self.groups.is_member(group_id, user_id):
            raise NotGroupMemberError(ErrorContext(user_id=user_id, group_id=group_id))

        message = GroupMessage(group_id=group_id, user_id=user_id, message=text)
        self.db.add(message)
        await self.db.commit()
        logger.debug(
            "Message posted", extra={"group_id": group_id, "user_id": user_id},
        )
        return message

    async def list_messages(self, group_id: GroupId) -> list[dict]:
        await self.groups.require_group(group_id)
        result = await self.db.execute(
            select(GroupMessage, User.display_name)
            .join(User, User.id == GroupMessage.user_id)
            .where(GroupMessage.group_id == group_id)
            .order_by(GroupMessage.sent_at.asc(), GroupMessage.id.asc())
            .limit(MESSAGE_PAGE_LIMIT)
        )
        return [
            {
                "id": m.id,
                "group_id": m.group_id,
                "user_id": m.user_id,
                "display_name": display_name,
                "message": m.message,
                "sent_at": m.sent_at,
            }
            for m, display_name in result.all()
        ]
