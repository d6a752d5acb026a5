"""
Request bodies.

Payloads use the RealWorld envelope (``{"user": {...}}``,
``{"article": {...}}``, ``{"comment": {...}}``) and its camelCase field
names. Blank strings pass through here on purpose: the domain entities
reject them with field-level errors.
"""
from pydantic import BaseModel, ConfigDict, Field


# --- User ---

class NewUser(BaseModel):
    username: str = Field(max_length=100)
    email: str = Field(max_length=255)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=1, max_length=72)


class NewUserRequest(BaseModel):
    user: NewUser


class LoginUser(BaseModel):
    email: str
    password: str = Field(max_length=72)


class LoginRequest(BaseModel):
    user: LoginUser


class UpdateUser(BaseModel):
    email: str | None = Field(None, max_length=255)
    username: str | None = Field(None, max_length=100)
    password: str | None = Field(None, max_length=72)
    bio: str | None = None
    image: str | None = Field(None, max_length=512)


class UpdateUserRequest(BaseModel):
    user: UpdateUser


# --- Article ---

class NewArticle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(max_length=300)
    description: str
    body: str
    tag_list: list[str] = Field(default_factory=list, alias="tagList")


class NewArticleRequest(BaseModel):
    article: NewArticle


class UpdateArticle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, max_length=300)
    description: str | None = None
    body: str | None = None
    tag_list: list[str] | None = Field(None, alias="tagList")


class UpdateArticleRequest(BaseModel):
    article: UpdateArticle


# --- Comment ---

class NewComment(BaseModel):
    body: str


class NewCommentRequest(BaseModel):
    comment: NewComment
