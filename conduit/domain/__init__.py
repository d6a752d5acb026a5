# Domain package.
#
# Plain dataclasses holding the creation and mutation rules of each
# aggregate. Nothing here imports FastAPI or SQLAlchemy:
#
#   user     - registration fields and profile updates
#   article  - slug derivation and timestamp rules
#   comment  - immutable comments
#   errors   - exceptions raised by entities and application services
from conduit.domain.article import Article, slugify, to_slug
from conduit.domain.comment import Comment
from conduit.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntityError,
    EntityNotFoundError,
    ValidationError,
)
from conduit.domain.user import User

__all__ = [
    "Article",
    "AuthenticationError",
    "AuthorizationError",
    "Comment",
    "DuplicateEntityError",
    "EntityNotFoundError",
    "User",
    "ValidationError",
    "slugify",
    "to_slug",
]
