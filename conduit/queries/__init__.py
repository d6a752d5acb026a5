# Query services (read side).
#
# Each class reshapes rows straight into the JSON views the API returns,
# batching lookups so a page costs a fixed number of statements. Nothing
# here goes through the domain entities or writes to the database.
from conduit.queries.article_queries import ArticleQueryService
from conduit.queries.comment_queries import CommentQueryService
from conduit.queries.profile_queries import ProfileQueryService
from conduit.queries.tag_queries import TagQueryService

__all__ = [
    "ArticleQueryService",
    "CommentQueryService",
    "ProfileQueryService",
    "TagQueryService",
]
