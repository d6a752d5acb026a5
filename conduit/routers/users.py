from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from conduit.dependencies import get_current_user, get_raw_token, get_user_service
from conduit.domain import User
from conduit.queries.views import user_view
from conduit.schemas import LoginRequest, NewUserRequest, UpdateUserRequest
from conduit.services import UserService

router = APIRouter(prefix="/api", tags=["users"])

_TAKEN = HTTPException(
    status_code=409,
    detail="A user with this username or email already exists",
)


@router.post("/users", status_code=201)
async def register(data: NewUserRequest, users: UserService = Depends(get_user_service)):
    try:
        return {"user": await users.register(data.user)}
    except IntegrityError:
        raise _TAKEN


@router.post("/users/login")
async def login(data: LoginRequest, users: UserService = Depends(get_user_service)):
    return {"user": await users.login(data.user.email, data.user.password)}


@router.get("/user")
async def current_user(
    user: User = Depends(get_current_user),
    token: str = Depends(get_raw_token),
):
    return {"user": user_view(user, token)}


@router.put("/user")
async def update_user(
    data: UpdateUserRequest,
    user: User = Depends(get_current_user),
    token: str = Depends(get_raw_token),
    users: UserService = Depends(get_user_service),
):
    try:
        return {"user": await users.update(user, data.user, token)}
    except IntegrityError:
        raise _TAKEN
