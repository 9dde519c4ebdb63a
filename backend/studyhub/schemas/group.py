"""Group Schemas: creation payload and group/member views.

Invariants:
    - GroupCreate.max_members >= 1 so the owner always fits
    - GroupCreate.level is one of the GroupLevel values (defaults to mixed)
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from studyhub.core.domain_types import DEFAULT_MAX_MEMBERS, MAX_ROW_ID, GroupLevel, MemberRole


class GroupCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subject_id: int = Field(ge=1, le=MAX_ROW_ID)
    description: str | None = Field(None, max_length=5000)
    level: GroupLevel = GroupLevel.MIXED
    max_members: int = Field(DEFAULT_MAX_MEMBERS, ge=1, le=1000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @field_validator("level", mode="before")
    @classmethod
    def empty_level_means_mixed(cls, v):
        return v or GroupLevel.MIXED

    @field_validator("max_members", mode="before")
    @classmethod
    def missing_capacity_means_default(cls, v):
        return DEFAULT_MAX_MEMBERS if v is None else v


class GroupCreated(BaseModel):
    ok: bool = True
    groupId: int


class GroupResponse(BaseModel):
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


class MemberResponse(BaseModel):
    user_id: int
    display_name: str
    role: MemberRole
