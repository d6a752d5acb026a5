"""
User service: registration, login, profile updates and follows.

Passwords are hashed before a ``User`` is built, so the entity never sees
the plain text. Username/email uniqueness is checked up front for a clean
409; the unique constraints in the schema still catch races.
"""
import logging

from conduit.domain import (
    AuthenticationError,
    DuplicateEntityError,
    EntityNotFoundError,
    User,
    ValidationError,
)
from conduit.domain.base import require_non_blank
from conduit.queries import ProfileQueryService
from conduit.queries.views import user_view
from conduit.repositories import UserRepository
from conduit.schemas import NewUser, UpdateUser
from conduit.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        users: UserRepository,
        profiles: ProfileQueryService,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self._users = users
        self._profiles = profiles
        self._hasher = hasher
        self._tokens = tokens

    async def _ensure_available(self, username: str | None, email: str | None, owner_id: str | None = None) -> None:
        if username:
            other = await self._users.find_by_username(username)
            if other is not None and other.id != owner_id:
                raise DuplicateEntityError("User", "username", username)
        if email:
            other = await self._users.find_by_email(email)
            if other is not None and other.id != owner_id:
                raise DuplicateEntityError("User", "email", email)

    def _hash(self, password: str) -> str:
        # The entity only ever holds the hash, so blank passwords are caught here
        require_non_blank(password=password)
        return self._hasher.hash(password)

    async def register(self, data: NewUser) -> dict:
        await self._ensure_available(data.username, data.email)
        user = User.create(
            email=data.email,
            username=data.username,
            password=self._hash(data.password),
        )
        await self._users.save(user)
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user_view(user, self._tokens.issue(user))

    async def login(self, email: str, password: str) -> dict:
        user = await self._users.find_by_email(email)
        if user is None or not self._hasher.verify(password, user.password):
            logger.info("Failed login for %r", email)
            raise AuthenticationError("email or password is invalid")
        return user_view(user, self._tokens.issue(user))

    async def update(self, user: User, data: UpdateUser, token: str) -> dict:
        await self._ensure_available(data.username, data.email, owner_id=user.id)
        user.update(
            email=data.email,
            username=data.username,
            password=self._hash(data.password) if data.password else None,
            bio=data.bio,
            image=data.image,
        )
        await self._users.save(user)
        return user_view(user, token)

    async def follow(self, follower: User, username: str) -> dict:
        target = await self._users.find_by_username(username)
        if target is None:
            raise EntityNotFoundError("Profile", username)
        if target.id == follower.id:
            raise ValidationError({"username": ["cannot follow yourself"]})
        await self._users.follow(follower.id, target.id)
        return await self._profiles.find_by_username(username, follower.id)

    async def unfollow(self, follower: User, username: str) -> dict:
        target = await self._users.find_by_username(username)
        if target is None:
            raise EntityNotFoundError("Profile", username)
        await self._users.unfollow(follower.id, target.id)
        return await self._profiles.find_by_username(username, follower.id)
