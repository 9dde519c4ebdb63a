"""Match Route: find groups or study partners for a subject and level."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.dependencies import get_current_claims
from studyhub.core.domain_types import MatchType
from studyhub.core.matching import resolve_match_type
from studyhub.infrastructure.database import get_db
from studyhub.infrastructure.tokens import Claims
from studyhub.schemas.match import GroupMatch, UserMatch
from studyhub.services.matching import MatchQueryEngine

router = APIRouter(prefix="/api", tags=["matching"])


@router.get("/match")
async def find_matches(
    subject_id: int | None = Query(None),
    level: str | None = Query(None, max_length=20),
    match_type: str | None = Query(None, alias="type", max_length=20),
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> list[GroupMatch] | list[UserMatch]:
    """type=group searches groups; anything else searches users.

    Without a subject nothing can match, so the result is empty rather than an error.
    """
    resolved = resolve_match_type(match_type)
    rows = await MatchQueryEngine(db).find_matches(subject_id, level, resolved)
    if resolved is MatchType.GROUP:
        return [GroupMatch(**row) for row in rows]
    return [UserMatch(**row) for row in rows]
