"""Match Query Engine: read-only filtered search over groups or users by subject.

Invariants:
    - Group mode: subject filter, optional level filter where mixed groups
      always match, newest first, live member_count
    - User mode: subject filter, optional exact level filter, insertion order,
      bio from the profile when one exists
    - Both modes return at most MATCH_RESULT_LIMIT rows; no pagination
    - A missing or unstorable subject_id matches nothing (empty list, no query)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.core.domain_types import MATCH_RESULT_LIMIT, MatchType, SubjectId, is_storable_id
from studyhub.core.matching import group_levels_for
from studyhub.models.group import Group
from studyhub.models.profile import Profile, UserSubject
from studyhub.models.subject import Subject
from studyhub.models.user import User
from studyhub.services.groups import group_summary_query, summary_row_to_dict


class MatchQueryEngine:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_matches(
        self, subject_id: SubjectId | None, level: str | None, match_type: MatchType,
    ) -> list[dict]:
        if subject_id is None or not is_storable_id(subject_id):
            return []
        if match_type is MatchType.GROUP:
            return await self._match_groups(subject_id, level)
        return await self._match_users(subject_id, level)

    async def _match_groups(self, subject_id: SubjectId, level: str | None) -> list[dict]:
        query = group_summary_query().where(Group.subject_id == subject_id)
        levels = group_levels_for(level)
        if levels is not None:
            query = query.where(Group.level.in_(levels))
        result = await self.db.execute(query.limit(MATCH_RESULT_LIMIT))
        return [summary_row_to_dict(row) for row in result.all()]

    async def _match_users(self, subject_id: SubjectId, level: str | None) -> list[dict]:
        query = (
            select(
                User.id, User.display_name, Profile.bio,
                UserSubject.level, Subject.name,
            )
            .select_from(UserSubject)
            .join(User, User.id == UserSubject.user_id)
            .outerjoin(Profile, Profile.user_id == User.id)
            .join(Subject, Subject.id == UserSubject.subject_id)
            .where(UserSubject.subject_id == subject_id)
        )
        if level:
            query = query.where(UserSubject.level == level)
        query = query.order_by(UserSubject.created_at, UserSubject.user_id)
        result = await self.db.execute(query.limit(MATCH_RESULT_LIMIT))
        return [
            {
                "id": uid,
                "display_name": name,
                "bio": bio,
                "level": user_level,
                "subject_name": subject_name,
            }
            for uid, name, bio, user_level, subject_name in result.all()
        ]
