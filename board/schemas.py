import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

TITLE_MAX_LENGTH = 200
AUTHOR_MAX_LENGTH = 100


# --- Post ---

class PostBase(BaseModel):
    title: str
    content: str
    author: str


class PostCreate(PostBase):
    """Form input for both creating and editing a post (full replace)."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1)
    author: str = Field(min_length=1, max_length=AUTHOR_MAX_LENGTH)
    model_config = ConfigDict(str_strip_whitespace=True)


class Post(PostBase):
    """A stored post, as read back from the ``posts`` table."""

    id: int = Field(gt=0)
    created_at: str = Field(alias="createdAt", min_length=1)
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def created_at_display(self) -> str:
        """``created_at`` formatted for humans; the raw value if it does not parse."""
        try:
            return datetime.fromisoformat(self.created_at).strftime("%Y-%m-%d %H:%M:%S")
        except ValueError:
            return self.created_at


# --- Validation ---

_REQUIRED_MESSAGES = {
    "title": "Please enter a title.",
    "content": "Please enter the content.",
    "author": "Please enter the author.",
}

_TOO_LONG_MESSAGES = {
    "title": f"Title must be {TITLE_MAX_LENGTH} characters or fewer.",
    "author": f"Author must be {AUTHOR_MAX_LENGTH} characters or fewer.",
}


def validate_post_input(title: str, content: str, author: str) -> tuple[PostCreate | None, dict[str, str], dict[str, str]]:
    """
    Validate raw form values.

    Returns ``(post, errors, values)``.  *post* is None when *errors* is
    non-empty.  *values* always holds the stripped strings so a form can
    be re-rendered with what the user typed.
    """
    values = {"title": title.strip(), "content": content.strip(), "author": author.strip()}
    try:
        return PostCreate(**values), {}, values
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            field = str(err["loc"][0])
            if err["type"] == "string_too_long":
                errors[field] = _TOO_LONG_MESSAGES.get(field, "Value is too long.")
            else:
                errors.setdefault(field, _REQUIRED_MESSAGES.get(field, "Invalid value."))
        return None, errors, values


# --- Pagination ---

class PostPage(BaseModel):
    items: list[Post]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total > 0 else 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total

    @property
    def prev_page(self) -> int:
        return self.page - 1

    @property
    def next_page(self) -> int:
        return self.page + 1
