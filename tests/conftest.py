import pytest
import pytest_asyncio

from postdeck.db_context import DatabaseManager
from postdeck.post_repository import PostRepository
from tests.fakes import FakePool


@pytest_asyncio.fixture
async def fake_pool():
    """Register an in-memory pool as the default database for one test."""
    pool = FakePool()
    await DatabaseManager.add_pool("default", pool, acquire_timeout=8.0)

    yield pool

    await DatabaseManager.close_pool("default")


@pytest.fixture
def post_repo(fake_pool):
    return PostRepository()


@pytest.fixture
def template_dir(tmp_path):
    """A template directory holding one index and one detail template."""
    (tmp_path / "index.html.in").write_text(
        "<ul>{% for link in navbar.links %}<li>{{ link.name }}</li>{% endfor %}</ul>"
        "{% for post in posts %}<h2>{{ post.title }}</h2>{% endfor %}"
        "<span>page {{ page_num }}</span>"
        "{% if has_more %}<a class=\"older\">Older</a>{% endif %}",
        encoding="utf-8",
    )
    (tmp_path / "post_detail.html.in").write_text(
        "<h1>{{ post.title }}</h1>{{ post.content | markdown }}",
        encoding="utf-8",
    )
    return tmp_path
