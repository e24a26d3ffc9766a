"""Group endpoints."""

from fastapi import APIRouter, Query, status

from wannago.api.deps import CacheDep, CurrentGroup, Session
from wannago.models.group import GroupCreate, GroupIdAvailability, GroupRead, GroupUpdate
from wannago.services import groups as group_service

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=GroupRead, status_code=status.HTTP_201_CREATED)
async def create_group(body: GroupCreate, session: Session) -> GroupRead:
    """Create a group. A custom id may be supplied; otherwise one is generated."""
    return await group_service.create_group(session, body)


@router.get("/check-id", response_model=GroupIdAvailability)
async def check_group_id(
    session: Session,
    group_id: str = Query(min_length=1),
) -> GroupIdAvailability:
    group_service.validate_group_id(group_id)
    available = await group_service.is_group_id_available(session, group_id)
    return GroupIdAvailability(available=available)


@router.get("/{group_id}", response_model=GroupRead)
async def get_group(group: CurrentGroup) -> GroupRead:
    return group


@router.patch("/{group_id}", response_model=GroupRead)
async def update_group(
    group: CurrentGroup,
    body: GroupUpdate,
    session: Session,
    cache: CacheDep,
) -> GroupRead:
    return await group_service.update_group(session, cache, group.id, body)
