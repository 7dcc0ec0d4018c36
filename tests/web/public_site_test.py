import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from postdeck.config import NavbarConfig
from postdeck.rendering import TemplateRenderer
from postdeck.site import SitePages
from postdeck.web.public import create_site_app


@pytest_asyncio.fixture
async def client(post_repo, template_dir):
    pages = SitePages(post_repo, TemplateRenderer(template_dir), NavbarConfig())
    app = create_site_app(pages=pages)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


class TestSite:
    @pytest.mark.asyncio
    async def test_home_page(self, client, post_repo):
        await post_repo.create("First", "E", "C")
        response = await client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<h2>First</h2>" in response.text

    @pytest.mark.asyncio
    async def test_post_page(self, client, post_repo):
        post_id = await post_repo.create("First", "E", "**bold**")
        response = await client.get(f"/post/{post_id}")
        assert response.status_code == 200
        assert "<strong>bold</strong>" in response.text

    @pytest.mark.asyncio
    async def test_missing_post_is_404(self, client):
        response = await client.get("/post/3")
        assert response.status_code == 404
        assert response.json() == {
            "err_msg": "Post with ID 3 not found or database error.",
            "status_code": 404,
        }

    @pytest.mark.asyncio
    async def test_negative_page(self, client):
        response = await client.get("/", params={"page_num": -2})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_broken_template_is_500_without_html(self, client, template_dir):
        (template_dir / "index.html.in").write_text("{% if %}", encoding="utf-8")
        response = await client.get("/")
        assert response.status_code == 500
        assert response.json()["err_msg"].startswith("could not parse template")


def test_site_app_needs_pages_or_config():
    with pytest.raises(ValueError):
        create_site_app()
