"""Profile Routes: profile upsert/read, user subjects, subject listing."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.dependencies import get_current_claims
from studyhub.infrastructure.database import get_db
from studyhub.infrastructure.tokens import Claims
from studyhub.schemas.profile import (
    OkResponse, ProfileResponse, ProfileUpsert, SubjectResponse, UserSubjectUpsert,
)
from studyhub.services.profiles import ProfileService

router = APIRouter(prefix="/api", tags=["profiles"])


@router.post("/profile", response_model=OkResponse)
async def upsert_profile(
    body: ProfileUpsert,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    """Replace the caller's profile. Omitted fields are cleared."""
    await ProfileService(db).upsert_profile(
        claims.id, body.bio, body.location, body.availability,
    )
    return OkResponse()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).get_profile(claims.id)


@router.post("/user/subject", response_model=OkResponse)
async def upsert_user_subject(
    body: UserSubjectUpsert,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    await ProfileService(db).upsert_user_subject(claims.id, body.subject_id, body.level)
    return OkResponse()


@router.get("/subjects", response_model=list[SubjectResponse])
async def list_subjects(db: AsyncSession = Depends(get_db)):
    return await ProfileService(db).list_subjects()
