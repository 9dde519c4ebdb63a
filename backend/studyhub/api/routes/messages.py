"""Message Routes: group chat log (polling only, no push)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.dependencies import get_current_claims
from studyhub.config import Settings, get_settings
from studyhub.infrastructure.database import get_db
from studyhub.infrastructure.tokens import Claims
from studyhub.schemas.message import MessagePost, MessageResponse
from studyhub.schemas.profile import OkResponse
from studyhub.services.messages import MessageLog

router = APIRouter(prefix="/api/groups", tags=["messages"])


@router.get("/{group_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    group_id: int,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await MessageLog(db).list_messages(group_id)


@router.post("/{group_id}/messages", response_model=OkResponse)
async def post_message(
    group_id: int,
    body: MessagePost,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    log = MessageLog(db, require_membership=settings.require_membership_to_post)
    await log.post_message(group_id, claims.id, body.message)
    return OkResponse()
