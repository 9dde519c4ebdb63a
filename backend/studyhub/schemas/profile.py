"""Profile Schemas: profile upsert, user-subject upsert, and subject listing.

Invariants:
    - ProfileUpsert fields are all optional; omitted fields become null on write
    - UserSubjectUpsert requires both subject_id and a non-empty level
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studyhub.core.domain_types import MAX_ROW_ID


class ProfileUpsert(BaseModel):
    bio: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=255)
    availability: str | None = Field(None, max_length=255)


class UserSubjectUpsert(BaseModel):
    subject_id: int = Field(ge=1, le=MAX_ROW_ID)
    level: str = Field(min_length=1, max_length=20)

    @field_validator("level")
    @classmethod
    def strip_level(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("level cannot be empty or whitespace")
        return v


class SubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class UserSubjectResponse(BaseModel):
    subject_id: int
    subject_name: str
    level: str


class ProfileResponse(BaseModel):
    user_id: int
    bio: str | None = None
    location: str | None = None
    availability: str | None = None
    subjects: list[UserSubjectResponse] = []


class OkResponse(BaseModel):
    ok: bool = True
