"""Server-side rendering of posts into HTML.

A render reads the template from disk, compiles it in a fresh jinja2
environment and renders it. Nothing is cached between renders, so edits to a
template show up on the next request.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

import markdown
from jinja2 import Environment, TemplateError, TemplateSyntaxError, select_autoescape
from markupsafe import Markup

from postdeck.errors import InternalError

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = [
    "tables",
    "footnotes",
    "fenced_code",
    "pymdownx.tilde",
    "pymdownx.tasklist",
]
MARKDOWN_EXTENSION_CONFIGS = {
    # ~~text~~ only; ~text~ stays literal
    "pymdownx.tilde": {"subscript": False},
    "pymdownx.tasklist": {"custom_checkbox": False},
}


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML with strikethrough, tables, footnotes and task lists."""
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(text)


def markdown_filter(value: Any) -> Markup:
    """Markdown filter for templates; the result is embedded without escaping."""
    if value is None:
        return Markup("")
    return Markup(markdown_to_html(str(value)))


DEFAULT_FILTERS: dict[str, Callable[..., Any]] = {"markdown": markdown_filter}


class Renderer(Protocol):
    def render(self, template_name: str, context: Mapping[str, Any]) -> str: ...


class TemplateRenderer:
    """Renders templates stored as plain files under ``template_dir``."""

    def __init__(
        self,
        template_dir: str | Path,
        filters: Mapping[str, Callable[..., Any]] | None = None,
    ):
        self.template_dir = Path(template_dir)
        self.filters = dict(DEFAULT_FILTERS if filters is None else filters)

    def _read_template(self, template_name: str) -> str:
        template_path = self.template_dir / template_name
        try:
            return template_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InternalError(
                f"Failed to read template file '{template_path}': {exc}"
            ) from exc

    def _environment(self) -> Environment:
        env = Environment(autoescape=select_autoescape(default_for_string=True))
        env.filters.update(self.filters)
        return env

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        source = self._read_template(template_name)

        env = self._environment()
        try:
            template = env.from_string(source)
        except TemplateSyntaxError as exc:
            raise InternalError(f"could not parse template: {exc}") from exc

        try:
            html = template.render(**context)
        except InternalError:
            raise
        except TemplateError as exc:
            raise InternalError(f"could not render template: {exc}") from exc
        except Exception as exc:
            # a filter blew up mid-render
            raise InternalError(f"could not render template: {exc!r}") from exc

        logger.debug("rendered %s (%d bytes)", template_name, len(html))
        return html
