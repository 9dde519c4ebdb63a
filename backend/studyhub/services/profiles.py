"""Profile Store: profile and user-subject upserts, subject reference data.

Invariants:
    - upsert_profile overwrites all three fields; omitted ones become NULL
    - upsert_user_subject overwrites level for an existing (user, subject) pair
    - Upserts are single INSERT ... ON CONFLICT statements: concurrent first
      writes for the same key cannot both insert
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.core.domain_types import SubjectId, UserId
from studyhub.core.errors import InputValidationError, ResourceNotFoundError
from studyhub.infrastructure.database import upsert_insert
from studyhub.models.profile import Profile, UserSubject
from studyhub.models.subject import Subject

logger = logging.getLogger(__name__)


class ProfileService:
    """Key-value style profile storage keyed by user id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert_profile(
        self,
        user_id: UserId,
        bio: str | None = None,
        location: str | None = None,
        availability: str | None = None,
    ) -> None:
        values = {
            "bio": bio or None,
            "location": location or None,
            "availability": availability or None,
        }
        insert = upsert_insert(self.db)
        stmt = insert(Profile).values(user_id=user_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Profile.user_id],
            set_={**values, "updated_at": datetime.now(timezone.utc)},
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def get_profile(self, user_id: UserId) -> dict:
        """Profile fields plus the user's subjects. Empty fields when never set."""
        profile = await self.db.get(Profile, user_id, populate_existing=True)
        result = await self.db.execute(
            select(UserSubject.subject_id, Subject.name, UserSubject.level)
            .join(Subject, Subject.id == UserSubject.subject_id)
            .where(UserSubject.user_id == user_id)
            .order_by(Subject.name)
        )
        return {
            "user_id": user_id,
            "bio": profile.bio if profile else None,
            "location": profile.location if profile else None,
            "availability": profile.availability if profile else None,
            "subjects": [
                {"subject_id": sid, "subject_name": name, "level": level}
                for sid, name, level in result.all()
            ],
        }

    async def upsert_user_subject(self, user_id: UserId, subject_id: SubjectId, level: str) -> None:
        if not subject_id or not level:
            raise InputValidationError("subject_id and level are required", "subject_id")
        if await self.db.get(Subject, subject_id) is None:
            raise ResourceNotFoundError("Subject", subject_id)

        insert = upsert_insert(self.db)
        stmt = insert(UserSubject).values(
            user_id=user_id, subject_id=subject_id, level=level,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserSubject.user_id, UserSubject.subject_id],
            set_={"level": level},
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def list_subjects(self) -> list[Subject]:
        result = await self.db.execute(select(Subject).order_by(Subject.name))
        return list(result.scalars().all())
