"""Match Schemas: query parameters and the two result shapes."""

from datetime import datetime

from pydantic import BaseModel

from studyhub.core.domain_types import GroupLevel


class GroupMatch(BaseModel):
    id: int
    title: str
    subject_id: int
    subject_name: str
    description: str
    owner_id: int
    owner_name: str
    level: GroupLevel
    max_members: int
    member_count: int
    created_at: datetime


class UserMatch(BaseModel):
    id: int
    display_name: str
    bio: str | None = None
    level: str
    subject_name: str
