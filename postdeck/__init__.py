"""postdeck - posts store with a public site renderer and an admin API"""

from postdeck.entities import UNBOUNDED, NewPost, Pagination, Post, PostUpdate
from postdeck.errors import AppError, ErrorKind, InternalError, NotFoundError, StatusMap, ValidationError
from postdeck.post_repository import PostRepository
from postdeck.rendering import Renderer, TemplateRenderer, markdown_filter, markdown_to_html
from postdeck.repository import Repository, RepositoryConfig

__all__ = [
    "AppError",
    "ErrorKind",
    "InternalError",
    "NewPost",
    "NotFoundError",
    "Pagination",
    "Post",
    "PostRepository",
    "PostUpdate",
    "Renderer",
    "Repository",
    "RepositoryConfig",
    "StatusMap",
    "TemplateRenderer",
    "UNBOUNDED",
    "ValidationError",
    "markdown_filter",
    "markdown_to_html",
]
