import logging

from postdeck.db_context import DatabaseManager
from postdeck.entities import (
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    UNBOUNDED,
    NewPost,
    Pagination,
    Post,
    PostUpdate,
    Unbounded,
)
from postdeck.errors import NotFoundError, ValidationError
from postdeck.repository import Repository, RepositoryConfig

logger = logging.getLogger(__name__)

POSTS_TABLE = "posts"

# BIGSERIAL never hands out an id twice, even after deletes
POSTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    id BIGSERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    excerpt TEXT NOT NULL,
    content TEXT NOT NULL
);
"""

POST_NOT_FOUND = "could not find post id in database"
NEGATIVE_PAGE = "page number cannot be negative"

# Largest value a BIGINT id column can hold
MAX_POST_ID = 2**63 - 1


def _require_text(field: str, value: str | None):
    if not value:
        raise ValidationError(f"cannot have empty post {field}")


def _storable_id(post_id: int) -> bool:
    return 0 <= post_id <= MAX_POST_ID


class PostRepository(Repository[Post, PostUpdate]):
    """CRUD and windowed pagination over posts.

    Every public method runs in its own transaction, or joins the caller's when
    one is already open on the current context.
    """

    def __init__(self, config: RepositoryConfig | None = None):
        super().__init__(
            entity_class=Post,
            update_class=PostUpdate,
            table_name=POSTS_TABLE,
            config=config,
        )

    async def create_schema(self):
        async with DatabaseManager.transaction(self.db_name):
            await self.db_ops.execute_query(
                POSTS_TABLE_DDL.format(table=self._qualified_table_name), []
            )

    async def create(self, title: str, excerpt: str, content: str) -> int:
        """Insert a post and return its new id."""
        _require_text("title", title)
        _require_text("excerpt", excerpt)
        _require_text("content", content)

        async with DatabaseManager.transaction(self.db_name):
            post_id = await self.insert(
                {"title": title, "excerpt": excerpt, "content": content}
            )
        logger.info("created post %s", post_id)
        return post_id

    async def create_post(self, new_post: NewPost) -> int:
        return await self.create(new_post.title, new_post.excerpt, new_post.content)

    async def get_by_id(self, post_id: int) -> Post:
        if not _storable_id(post_id):
            raise NotFoundError(POST_NOT_FOUND)
        async with DatabaseManager.transaction(self.db_name):
            post = await self.find_by_id(post_id)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND)
        return post

    async def delete_by_id(self, post_id: int) -> int:
        """Delete a post and echo its id; a missing post raises NotFoundError."""
        if not _storable_id(post_id):
            raise NotFoundError(POST_NOT_FOUND)
        async with DatabaseManager.transaction(self.db_name):
            deleted = await self.delete(post_id)
        if not deleted:
            raise NotFoundError(POST_NOT_FOUND)
        logger.info("deleted post %s", post_id)
        return post_id

    async def update_by_id(self, post_id: int, update: PostUpdate) -> Post:
        for field in ("title", "excerpt", "content"):
            if field in update.model_fields_set:
                _require_text(field, getattr(update, field))
        if not _storable_id(post_id):
            raise NotFoundError(POST_NOT_FOUND)

        async with DatabaseManager.transaction(self.db_name):
            post = await self.update(post_id, update)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND)
        return post

    async def list_posts(
        self,
        offset: int = DEFAULT_OFFSET,
        limit: int | Unbounded = DEFAULT_LIMIT,
    ) -> list[Post]:
        """Return the posts whose id lies in ``[offset * limit, (offset + 1) * limit)``.

        This slices the id keyspace page by page rather than skipping rows, so a
        page is short whenever ids inside its window were deleted or never
        issued. With ``limit=UNBOUNDED`` page 0 holds every post and any later
        page is empty.
        """
        if offset < 0 or (limit is not UNBOUNDED and limit < 0):
            raise ValidationError(NEGATIVE_PAGE)

        if limit is UNBOUNDED:
            if offset > 0:
                return []
            start, end = 0, None
        else:
            start, end = offset * limit, (offset + 1) * limit
            # windows past the largest storable id are empty or open-ended
            if start > MAX_POST_ID:
                return []
            if end > MAX_POST_ID:
                end = None

        builder = self.query().where_range("id", start, end).order_by_asc("id")
        async with DatabaseManager.transaction(self.db_name):
            return await self.fetch(builder)

    async def list_page(self, pagination: Pagination) -> list[Post]:
        return await self.list_posts(pagination.offset, pagination.limit)

    async def count_posts(self) -> int:
        async with DatabaseManager.transaction(self.db_name):
            return await self.count()
