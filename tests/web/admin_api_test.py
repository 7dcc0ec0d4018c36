import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from postdeck.web.admin import create_admin_app


@pytest_asyncio.fixture
async def client(post_repo):
    app = create_admin_app(repository=post_repo)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


class TestAdminApi:
    @pytest.mark.asyncio
    async def test_crud_roundtrip(self, client):
        response = await client.post("/posts", json={"title": "T", "excerpt": "E", "content": "C"})
        assert response.status_code == 200
        assert response.json() == {"post_id": 1}

        response = await client.get("/posts")
        assert response.json() == [{"post_id": 1, "title": "T", "excerpt": "E", "content": "C"}]

        response = await client.get("/posts/1")
        assert response.json()["title"] == "T"

        response = await client.patch("/posts/1", json={"excerpt": "New"})
        assert response.json()["excerpt"] == "New"

        response = await client.delete("/posts/1")
        assert response.json() == {"post_id": 1}

        assert (await client.get("/posts")).json() == []

    @pytest.mark.asyncio
    async def test_missing_post_is_bad_request(self, client):
        response = await client.get("/posts/9")
        assert response.status_code == 400
        assert response.json() == {
            "err_msg": "could not find post id in database",
            "status_code": 400,
        }

    @pytest.mark.asyncio
    async def test_delete_missing_post(self, client):
        response = await client.delete("/posts/9")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected(self, client):
        response = await client.post("/posts", json={"title": "", "excerpt": "E", "content": "C"})
        assert response.status_code == 400
        assert response.json()["err_msg"] == "cannot have empty post title"

    @pytest.mark.asyncio
    async def test_missing_body_field(self, client):
        response = await client.post("/posts", json={"title": "T"})
        assert response.status_code == 400
        assert response.json()["status_code"] == 400

    @pytest.mark.asyncio
    async def test_negative_pagination(self, client):
        response = await client.get("/posts", params={"offset": -1})
        assert response.status_code == 400
        assert response.json()["err_msg"] == "page number cannot be negative"

    @pytest.mark.asyncio
    async def test_pagination_parameters(self, client):
        for i in range(6):
            await client.post("/posts", json={"title": f"T{i}", "excerpt": "E", "content": "C"})
        response = await client.get("/posts", params={"offset": 1, "limit": 3})
        assert [post["post_id"] for post in response.json()] == [3, 4, 5]

        response = await client.get("/posts", params={"limit": "unbounded"})
        assert len(response.json()) == 6

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, client, fake_pool):
        fake_pool.acquire_error = TimeoutError()
        response = await client.get("/posts")
        assert response.status_code == 500
        assert response.json()["status_code"] == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    async def test_out_of_range_id_is_not_found(self, client, method):
        response = await client.request(method, f"/posts/{2**63}")
        assert response.status_code == 400
        assert response.json()["err_msg"] == "could not find post id in database"

    @pytest.mark.asyncio
    async def test_far_page_is_empty(self, client):
        await client.post("/posts", json={"title": "T", "excerpt": "E", "content": "C"})
        response = await client.get("/posts", params={"offset": 2**62, "limit": 10})
        assert response.status_code == 200
        assert response.json() == []
