"""Public read-only site: the post list and single post pages as HTML."""

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse

from postdeck.config import CmsConfig
from postdeck.entities import DEFAULT_OFFSET, UNBOUNDED
from postdeck.errors import SITE_STATUS_MAP, StatusMap
from postdeck.post_repository import PostRepository
from postdeck.rendering import TemplateRenderer
from postdeck.site import SitePages
from postdeck.web.common import add_request_logging, database_lifespan
from postdeck.web.errors import register_error_handlers

router = APIRouter()


def get_pages(request: Request) -> SitePages:
    return request.app.state.pages


@router.get("/", response_class=HTMLResponse)
async def home(page_num: int = DEFAULT_OFFSET, pages: SitePages = Depends(get_pages)):
    return HTMLResponse(await pages.index(page_num))


@router.get("/post/{post_id}", response_class=HTMLResponse)
async def post_detail(post_id: int, pages: SitePages = Depends(get_pages)):
    return HTMLResponse(await pages.post_detail(post_id))


def create_site_app(
    pages: SitePages | None = None,
    status_map: StatusMap = SITE_STATUS_MAP,
    config: CmsConfig | None = None,
) -> FastAPI:
    """Build the public site; with a config the app owns the pool and templates."""
    if pages is None and config is None:
        raise ValueError("create_site_app needs either pages or a config")

    lifespan = None
    if config is not None:
        lifespan = database_lifespan(config)
        status_map = config.site_status_map
        if pages is None:
            page_size = (
                UNBOUNDED if config.site_page_size is None else config.site_page_size
            )
            pages = SitePages(
                PostRepository(),
                TemplateRenderer(config.template_dir),
                config.navbar,
                page_size=page_size,
            )

    app = FastAPI(title="postdeck-site", lifespan=lifespan)
    app.state.pages = pages
    register_error_handlers(app, status_map)
    add_request_logging(app)
    app.include_router(router)
    return app
