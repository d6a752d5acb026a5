# Repositories package.
#
# One class per aggregate, each wrapping the request's AsyncSession:
#
#   UserRepository     - users and the follow relation
#   ArticleRepository  - articles, their tags and favorites
#   CommentRepository  - append-only comments
#
# Repositories flush but never commit; ``conduit.database.session_scope``
# owns the transaction.
from conduit.repositories.article_repository import ArticleRepository
from conduit.repositories.comment_repository import CommentRepository
from conduit.repositories.user_repository import UserRepository

__all__ = ["ArticleRepository", "CommentRepository", "UserRepository"]
