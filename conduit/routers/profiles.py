from fastapi import APIRouter, Depends, HTTPException

from conduit.dependencies import get_current_user, get_current_user_id, get_profile_queries, get_user_service
from conduit.domain import User
from conduit.queries import ProfileQueryService
from conduit.services import UserService

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("/{username}")
async def get_profile(
    username: str,
    viewer_id: str | None = Depends(get_current_user_id),
    profiles: ProfileQueryService = Depends(get_profile_queries),
):
    profile = await profiles.find_by_username(username, viewer_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"profile": profile}


@router.post("/{username}/follow")
async def follow(
    username: str,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return {"profile": await users.follow(user, username)}


@router.delete("/{username}/follow")
async def unfollow(
    username: str,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return {"profile": await users.unfollow(user, username)}
