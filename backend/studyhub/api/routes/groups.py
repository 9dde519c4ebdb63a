"""Group Routes: create, list, join, and member listing.

Invariants:
    - Join is delegated entirely to MembershipAdmissionController
    - 404 unknown group, 400 full or already a member, 500 retryable storage failure
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.dependencies import get_current_claims
from studyhub.config import Settings, get_settings
from studyhub.infrastructure.database import get_db
from studyhub.infrastructure.tokens import Claims
from studyhub.schemas.group import GroupCreate, GroupCreated, GroupResponse, MemberResponse
from studyhub.schemas.profile import OkResponse
from studyhub.services.admission import MembershipAdmissionController
from studyhub.services.groups import GroupRegistry

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.post(
    "", response_model=GroupCreated, status_code=status.HTTP_201_CREATED,
)
async def create_group(
    body: GroupCreate,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    """Create a group; the caller becomes its owner and first member."""
    group = await GroupRegistry(db).create_group(claims.id, body)
    return GroupCreated(groupId=group.id)


@router.get("", response_model=list[GroupResponse])
async def list_groups(db: AsyncSession = Depends(get_db)):
    return await GroupRegistry(db).list_groups()


@router.post("/{group_id}/join", response_model=OkResponse)
async def join_group(
    group_id: int,
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    controller = MembershipAdmissionController(db, settings.database_lock_timeout_seconds)
    await controller.join(group_id, claims.id)
    return OkResponse()


@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def list_members(group_id: int, db: AsyncSession = Depends(get_db)):
    return await GroupRegistry(db).get_members(group_id)
