"""
FastAPI dependencies: pagination, caller identity and service wiring.

Process-wide collaborators (``TokenService``, ``PasswordHasher``) are
built once in ``conduit.main`` and kept on ``app.state``. Per-request
collaborators (repositories, query services, application services) are
assembled here around the request's session.
"""
import logging

from fastapi import Depends, Header, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.config import settings
from conduit.database import get_db
from conduit.domain import User
from conduit.queries import ArticleQueryService, CommentQueryService, ProfileQueryService, TagQueryService
from conduit.repositories import ArticleRepository, CommentRepository, UserRepository
from conduit.security import PasswordHasher, TokenService
from conduit.services import ArticleService, CommentService, UserService

logger = logging.getLogger(__name__)

_TOKEN_PREFIXES = ("Token ", "Bearer ")


class PaginationParams:
    """
    ``limit``/``offset`` query parameters for article listings.

    ``limit`` is clamped to ``settings.MAX_PAGE_SIZE`` instead of being
    rejected, so clients asking for too much simply get a full page.
    """

    def __init__(
        self,
        limit: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            description="Number of articles to return.",
        ),
        offset: int = Query(
            0,
            ge=0,
            description="Number of articles to skip.",
        ),
    ) -> None:
        self.limit = min(limit, settings.MAX_PAGE_SIZE)
        self.offset = offset


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_raw_token(authorization: str | None = Header(None)) -> str | None:
    """The credential after its ``Token``/``Bearer`` prefix, or None."""
    if not authorization:
        return None
    for prefix in _TOKEN_PREFIXES:
        if authorization.startswith(prefix):
            return authorization[len(prefix):].strip() or None
    return None


def get_current_user_id(
    token: str | None = Depends(get_raw_token),
    tokens: TokenService = Depends(get_token_service),
) -> str | None:
    """Id of the caller, or None for anonymous callers and unusable tokens alike."""
    return tokens.validate(token)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Token"},
    )


def require_user_id(user_id: str | None = Depends(get_current_user_id)) -> str:
    if user_id is None:
        raise _unauthorized()
    return user_id


async def get_current_user(
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await UserRepository(db).find_by_id(user_id)
    if user is None:
        # Valid signature but the account is gone
        logger.info("Token subject %s has no user", user_id)
        raise _unauthorized()
    return user


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

def get_user_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(UserRepository(db), ProfileQueryService(db), hasher, tokens)


def get_article_service(db: AsyncSession = Depends(get_db)) -> ArticleService:
    return ArticleService(ArticleRepository(db), ArticleQueryService(db))


def get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(CommentRepository(db), ArticleRepository(db), CommentQueryService(db))


def get_article_queries(db: AsyncSession = Depends(get_db)) -> ArticleQueryService:
    return ArticleQueryService(db)


def get_profile_queries(db: AsyncSession = Depends(get_db)) -> ProfileQueryService:
    return ProfileQueryService(db)


def get_tag_queries(db: AsyncSession = Depends(get_db)) -> TagQueryService:
    return TagQueryService(db)
