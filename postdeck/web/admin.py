"""Administrative JSON API: create, list, fetch, update and delete posts."""

from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request

from postdeck.config import CmsConfig
from postdeck.entities import (
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    NewPost,
    Pagination,
    PostUpdate,
    parse_limit,
)
from postdeck.errors import ADMIN_STATUS_MAP, StatusMap
from postdeck.post_repository import PostRepository
from postdeck.web.common import add_request_logging, database_lifespan
from postdeck.web.errors import register_error_handlers

router = APIRouter()


def get_repository(request: Request) -> PostRepository:
    return request.app.state.repository


@router.get("/posts")
async def get_posts(
    offset: int = DEFAULT_OFFSET,
    limit: str = str(DEFAULT_LIMIT),
    repository: PostRepository = Depends(get_repository),
) -> list[dict[str, Any]]:
    pagination = Pagination(offset=offset, limit=parse_limit(limit))
    posts = await repository.list_page(pagination)
    return [post.to_response() for post in posts]


@router.post("/posts")
async def add_post(
    payload: NewPost, repository: PostRepository = Depends(get_repository)
) -> dict[str, int]:
    post_id = await repository.create_post(payload)
    return {"post_id": post_id}


@router.get("/posts/{post_id}")
async def get_post(
    post_id: int, repository: PostRepository = Depends(get_repository)
) -> dict[str, Any]:
    post = await repository.get_by_id(post_id)
    return post.to_response()


@router.patch("/posts/{post_id}")
async def update_post(
    post_id: int,
    payload: PostUpdate,
    repository: PostRepository = Depends(get_repository),
) -> dict[str, Any]:
    post = await repository.update_by_id(post_id, payload)
    return post.to_response()


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: int, repository: PostRepository = Depends(get_repository)
) -> dict[str, int]:
    deleted_id = await repository.delete_by_id(post_id)
    return {"post_id": deleted_id}


def create_admin_app(
    repository: PostRepository | None = None,
    status_map: StatusMap = ADMIN_STATUS_MAP,
    config: CmsConfig | None = None,
) -> FastAPI:
    """Build the admin app; with a config the app owns the database pool."""
    lifespan = database_lifespan(config) if config is not None else None
    if config is not None:
        status_map = config.admin_status_map

    app = FastAPI(title="postdeck-admin", lifespan=lifespan)
    app.state.repository = repository or PostRepository()
    register_error_handlers(app, status_map)
    add_request_logging(app)
    app.include_router(router)
    return app
