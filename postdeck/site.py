from postdeck.config import NavbarConfig
from postdeck.entities import DEFAULT_OFFSET, UNBOUNDED, Unbounded
from postdeck.errors import NotFoundError
from postdeck.post_repository import PostRepository
from postdeck.rendering import Renderer

INDEX_TEMPLATE = "index.html.in"
POST_DETAIL_TEMPLATE = "post_detail.html.in"


class SitePages:
    """The public site's two pages: the post list and a single post."""

    def __init__(
        self,
        repository: PostRepository,
        renderer: Renderer,
        navbar: NavbarConfig,
        page_size: int | Unbounded = UNBOUNDED,
    ):
        self.repository = repository
        self.renderer = renderer
        self.navbar = navbar
        self.page_size = page_size

    async def index(self, page_num: int = DEFAULT_OFFSET) -> str:
        posts = await self.repository.list_posts(page_num, self.page_size)
        # an unbounded first page already holds every post
        has_more = bool(posts) and self.page_size is not UNBOUNDED
        return self.renderer.render(
            INDEX_TEMPLATE,
            {
                "posts": [post.model_dump() for post in posts],
                "navbar": self.navbar.model_dump(),
                "page_num": page_num,
                "has_more": has_more,
            },
        )

    async def post_detail(self, post_id: int) -> str:
        try:
            post = await self.repository.get_by_id(post_id)
        except NotFoundError as exc:
            raise NotFoundError(
                f"Post with ID {post_id} not found or database error."
            ) from exc
        return self.renderer.render(
            POST_DETAIL_TEMPLATE,
            {"post": post.model_dump(), "navbar": self.navbar.model_dump()},
        )
