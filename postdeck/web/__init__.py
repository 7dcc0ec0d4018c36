"""FastAPI front-ends"""

from postdeck.web.admin import create_admin_app
from postdeck.web.public import create_site_app

__all__ = ["create_admin_app", "create_site_app"]
