from dataclasses import dataclass, field
from datetime import datetime

from conduit.domain.base import new_id, require_non_blank, utcnow


@dataclass(frozen=True)
class Comment:
    """A posted comment. Immutable: there is no edit path, only deletion."""

    body: str
    author_id: str
    article_id: str
    created_at: datetime
    id: str = field(default_factory=new_id)

    @classmethod
    def create(cls, body: str, author_id: str, article_id: str) -> "Comment":
        require_non_blank(body=body, author_id=author_id, article_id=article_id)
        return cls(body=body, author_id=author_id, article_id=article_id, created_at=utcnow())

    def may_be_deleted_by(self, user_id: str | None, article_author_id: str) -> bool:
        """The comment's author and the article's author may delete it."""
        return user_id is not None and user_id in (self.author_id, article_author_id)
