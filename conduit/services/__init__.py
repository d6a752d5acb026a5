# Application services (write side).
#
# Each class receives its collaborators through the constructor and is
# assembled per request in ``conduit.dependencies``:
#
#   ArticleService  - create / update / delete / favorite articles
#   CommentService  - add / list / delete comments on an article
#   UserService     - register, login, profile update, follow
#
# Services flush through repositories but never commit; the session scope
# opened by ``get_db`` owns the transaction boundary.
from conduit.services.article_service import ArticleService
from conduit.services.comment_service import CommentService
from conduit.services.user_service import UserService

__all__ = ["ArticleService", "CommentService", "UserService"]
