"""
Comment service: append-only comments on an article.

Comments have no edit path. Deletion is open to the comment's author and
to the author of the article it sits on.
"""
from conduit.domain import Article, AuthorizationError, Comment, EntityNotFoundError
from conduit.queries import CommentQueryService
from conduit.repositories import ArticleRepository, CommentRepository


class CommentService:
    def __init__(
        self,
        comments: CommentRepository,
        articles: ArticleRepository,
        queries: CommentQueryService,
    ):
        self._comments = comments
        self._articles = articles
        self._queries = queries

    async def _article(self, slug: str) -> Article:
        article = await self._articles.find_by_slug(slug)
        if article is None:
            raise EntityNotFoundError("Article", slug)
        return article

    async def add_comment(self, slug: str, author_id: str, body: str) -> dict:
        article = await self._article(slug)
        comment = Comment.create(body=body, author_id=author_id, article_id=article.id)
        await self._comments.save(comment)
        return await self._queries.find_by_id(comment.id, author_id)

    async def list_comments(self, slug: str, viewer_id: str | None = None) -> list[dict]:
        article = await self._article(slug)
        return await self._queries.find_by_article(article.id, viewer_id)

    async def delete_comment(self, slug: str, comment_id: str, user_id: str) -> None:
        article = await self._article(slug)
        comment = await self._comments.find_by_id(article.id, comment_id)
        if comment is None:
            raise EntityNotFoundError("Comment", comment_id)
        if not comment.may_be_deleted_by(user_id, article.author_id):
            raise AuthorizationError(f"user {user_id} may not delete comment {comment_id}")
        await self._comments.remove(comment)
