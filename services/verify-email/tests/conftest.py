import json
import os

os.environ["SUPABASE_URL"] = "https://project.supabase.test"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "service-role-key"

import httpx
import pytest
import pytest_asyncio

from verify_email.main import app, get_store_factory
from verify_email.store import ProfileStore


class FakeBackend:
    """Records PATCHes to the profiles REST endpoint and applies them in order."""

    def __init__(self, status_code=204):
        self.status_code = status_code
        self.requests = []
        self.profiles = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"message": "permission denied"})
        user_id = request.url.params["id"].removeprefix("eq.")
        self.profiles.setdefault(user_id, {}).update(json.loads(request.content))
        return httpx.Response(self.status_code)


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest_asyncio.fixture()
async def client(backend):
    transport = httpx.MockTransport(backend.handler)
    app.dependency_overrides[get_store_factory] = lambda: (
        lambda settings: ProfileStore(settings, transport=transport)
    )
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://function.test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
