"""
Article entity.

An article owns its slug and its two timestamps. ``updated_at`` never
falls behind ``created_at`` and moves forward on every mutation, including
an update that changes nothing.
"""
import re
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from conduit.domain.base import later_than, new_id, require_non_blank, utcnow

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_SPACE_RE = re.compile(r"[\s_]+")
_SLUG_DASH_RE = re.compile(r"-+")

SLUG_SUFFIX_BYTES = 3


def slugify(text: str) -> str:
    """Return the URL-safe, lowercase stem of a slug for *text*."""
    text = _SLUG_STRIP_RE.sub("", text.lower().strip())
    text = _SLUG_SPACE_RE.sub("-", text)
    return _SLUG_DASH_RE.sub("-", text).strip("-")


def to_slug(title: str, suffix: Optional[str] = None) -> str:
    """
    Slug for *title*: the slugified stem plus a short hex suffix.

    Deterministic for a given (title, suffix). With no suffix a random one
    is drawn, which keeps articles sharing a title apart.
    """
    if suffix is None:
        suffix = secrets.token_hex(SLUG_SUFFIX_BYTES)
    stem = slugify(title)
    return f"{stem}-{suffix}" if stem else suffix


def _normalize_tags(tags: Iterable[str] | None) -> set[str]:
    if not tags:
        return set()
    return {t.strip() for t in tags if t and t.strip()}


@dataclass
class Article:
    author_id: str
    title: str
    slug: str
    description: str
    body: str
    created_at: datetime
    updated_at: datetime
    tags: set[str] = field(default_factory=set)
    id: str = field(default_factory=new_id)

    @classmethod
    def create(
        cls,
        title: str,
        description: str,
        body: str,
        tags: Iterable[str] | None,
        author_id: str,
        created_at: datetime | None = None,
    ) -> "Article":
        """
        Build a new article.

        ``created_at`` overrides the creation time (backfill, tests); both
        timestamps start out equal either way. Raises ``ValidationError``
        listing every blank required field.
        """
        require_non_blank(title=title, description=description, body=body, author_id=author_id)
        if created_at is None:
            created_at = utcnow()
        elif created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        else:
            # Stored as UTC wall-clock digits; SQLite keeps no offset
            created_at = created_at.astimezone(timezone.utc)
        return cls(
            author_id=author_id,
            title=title,
            slug=to_slug(title),
            description=description,
            body=body,
            created_at=created_at,
            updated_at=created_at,
            tags=_normalize_tags(tags),
        )

    def update(
        self,
        title: str | None = None,
        description: str | None = None,
        body: str | None = None,
    ) -> None:
        """
        Replace every field given a non-None value and touch ``updated_at``.

        The slug is regenerated only when the title actually changes. All
        arguments are checked before anything is modified.
        """
        supplied = {
            name: value
            for name, value in (("title", title), ("description", description), ("body", body))
            if value is not None
        }
        require_non_blank(**supplied)

        if title is not None and title != self.title:
            self.title = title
            self.slug = to_slug(title)
        if description is not None:
            self.description = description
        if body is not None:
            self.body = body
        self.touch()

    def update_tags(self, tags: Iterable[str]) -> None:
        self.tags = _normalize_tags(tags)
        self.touch()

    def touch(self) -> None:
        self.updated_at = later_than(self.updated_at)

    @property
    def tag_list(self) -> list[str]:
        return sorted(self.tags)

    def is_written_by(self, user_id: str | None) -> bool:
        return user_id is not None and user_id == self.author_id

