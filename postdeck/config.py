"""TOML configuration shared by the public site and the admin API."""

import tomllib
from http import HTTPStatus
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from postdeck.db_context import PoolConfig
from postdeck.errors import StatusMap


class ConfigError(Exception):
    """The configuration file is missing, unreadable or invalid."""


class ConfigLink(BaseModel):
    # name of the link
    name: str
    # the hyperlink reference
    href: str
    # the title of the anchor
    title: str


class NavbarConfig(BaseModel):
    links: list[ConfigLink] = Field(default_factory=list)


class NotFoundStatusConfig(BaseModel):
    """HTTP status each front-end reports for a missing post"""

    admin: HTTPStatus = HTTPStatus.BAD_REQUEST
    site: HTTPStatus = HTTPStatus.NOT_FOUND


class CmsConfig(BaseModel):
    database_address: str
    database_port: int = 5432
    database_user: str
    database_password: str
    database_name: str
    webserver_port: int = 3000
    admin_port: int = 3001
    # accepted for compatibility with existing config files, unused
    image_dir: str = ""
    cache_enabled: bool = False
    recaptcha_sitekey: str = ""
    recaptcha_secret: str = ""

    navbar: NavbarConfig = Field(default_factory=NavbarConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    template_dir: Path = Path("views")
    # posts per page on the site index; omitted means a single page with every post
    site_page_size: int | None = Field(default=None, ge=0)
    not_found_status: NotFoundStatusConfig = Field(default_factory=NotFoundStatusConfig)

    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_address}:{self.database_port}/{self.database_name}"
        )

    @property
    def admin_status_map(self) -> StatusMap:
        return StatusMap(not_found_status=self.not_found_status.admin)

    @property
    def site_status_map(self) -> StatusMap:
        return StatusMap(not_found_status=self.not_found_status.site)

    def redacted(self) -> dict[str, Any]:
        """Dump for logging with secrets masked"""
        data = self.model_dump(mode="json")
        for key in ("database_password", "recaptcha_secret"):
            if data.get(key):
                data[key] = "***"
        return data


def load_config(config_path: str | Path) -> CmsConfig:
    path = Path(config_path)
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    try:
        return CmsConfig.model_validate(tomllib.loads(contents))
    except (tomllib.TOMLDecodeError, SchemaError) as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc
