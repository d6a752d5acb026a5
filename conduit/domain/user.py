import re
from dataclasses import dataclass, field

from conduit.domain.base import new_id, require_non_blank
from conduit.domain.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(email: str) -> None:
    if not _EMAIL_RE.match(email):
        raise ValidationError({"email": ["should be an email"]})


@dataclass
class User:
    """
    A registered user.

    ``password`` always holds a hash; hashing happens before the entity is
    built (see ``conduit.security.PasswordHasher``).
    """

    email: str
    username: str
    password: str
    bio: str = ""
    image: str = ""
    id: str = field(default_factory=new_id)

    @classmethod
    def create(
        cls,
        email: str,
        username: str,
        password: str,
        bio: str = "",
        image: str = "",
    ) -> "User":
        require_non_blank(email=email, username=username, password=password)
        _check_email(email)
        return cls(email=email, username=username, password=password, bio=bio or "", image=image or "")

    def update(
        self,
        email: str | None = None,
        username: str | None = None,
        password: str | None = None,
        bio: str | None = None,
        image: str | None = None,
    ) -> None:
        """
        Replace each field given a non-empty value; None and "" are ignored.

        A supplied username or password that is only whitespace is rejected,
        and everything is checked before any field changes.
        """
        require_non_blank(**{
            name: value
            for name, value in (("username", username), ("password", password))
            if value
        })
        if email:
            _check_email(email)

        if email:
            self.email = email
        if username:
            self.username = username
        if password:
            self.password = password
        if bio:
            self.bio = bio
        if image:
            self.image = image

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r})"
