from enum import Enum
from typing import Any, ClassVar, Final

from pydantic import BaseModel
from pydantic.config import ConfigDict

from postdeck.errors import ValidationError


class BaseEntity(BaseModel):
    """Base entity class for all database models."""

    model_config: ClassVar[ConfigDict] = ConfigDict(use_enum_values=True, extra="ignore")
    id: int


class Post(BaseEntity):
    title: str
    excerpt: str
    content: str

    def to_response(self) -> dict[str, Any]:
        """Admin API representation; the id travels as ``post_id``."""
        return {
            "post_id": self.id,
            "title": self.title,
            "excerpt": self.excerpt,
            "content": self.content,
        }


class NewPost(BaseModel):
    """Create payload"""

    title: str
    excerpt: str
    content: str


class PostUpdate(BaseModel):
    """Update model - defines which fields can be updated"""

    title: str | None = None
    excerpt: str | None = None
    content: str | None = None


# Sorting functionality
class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class Unbounded:
    """Sentinel limit meaning "no upper bound on the page size"."""

    _instance: ClassVar["Unbounded | None"] = None

    def __new__(cls) -> "Unbounded":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNBOUNDED"

    def __reduce__(self) -> tuple[type["Unbounded"], tuple[()]]:
        return (Unbounded, ())


UNBOUNDED: Final = Unbounded()

DEFAULT_OFFSET: Final = 0
DEFAULT_LIMIT: Final = 10


class Pagination(BaseModel):
    """Offset/limit pair taken from query parameters.

    ``offset`` is a page number, not a row count: the page covers ids
    ``[offset * limit, (offset + 1) * limit)``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    offset: int = DEFAULT_OFFSET
    limit: int | Unbounded = DEFAULT_LIMIT

    @property
    def is_unbounded(self) -> bool:
        return self.limit is UNBOUNDED


def parse_limit(raw: str | int | None) -> int | Unbounded:
    """Parse a ``limit`` query parameter; ``"unbounded"`` selects the sentinel."""
    if raw is None:
        return DEFAULT_LIMIT
    if isinstance(raw, int):
        return raw
    if raw.strip().lower() == "unbounded":
        return UNBOUNDED
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"invalid limit: {raw!r}") from exc
