import os
import tempfile
from datetime import datetime, timedelta, timezone

# Point the API at a throwaway SQLite file before social_api is imported
_DB_DIR = tempfile.mkdtemp(prefix="social-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'social.db')}"
os.environ["OTEL_ENABLED"] = "0"

import httpx
import pytest
import pytest_asyncio

from social_api import models
from social_api.database import AsyncSessionLocal, Base, engine

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture()
async def db_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture()
async def session(db_schema):
    async with AsyncSessionLocal() as s:
        yield s


@pytest_asyncio.fixture()
async def client(db_schema):
    from social_api.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def social_graph(session):
    """
    Four profiles, alice follows bob and carol, dave follows nobody.
    Each profile has posts at distinct minutes so ordering is deterministic.
    """
    alice = models.Profile(id="alice", username="alice", full_name="Alice Chen")
    bob = models.Profile(id="bob", username="bob", full_name="Bob Martinez")
    carol = models.Profile(id="carol", username="carol")
    dave = models.Profile(id="dave", username="dave")
    session.add_all([alice, bob, carol, dave])
    await session.flush()

    acme = models.Business(id="acme", owner_id="bob", name="Acme Labs")
    session.add(acme)
    session.add_all([
        models.Follow(follower_id="alice", following_id="bob"),
        models.Follow(follower_id="alice", following_id="carol"),
    ])

    minute = 0
    for author in ("alice", "bob", "carol", "dave"):
        for i in range(3):
            minute += 1
            session.add(models.Post(
                id=f"{author}-{i}",
                user_id=author,
                business_id="acme" if author == "bob" and i == 0 else None,
                content=f"{author} post {i}",
                created_at=BASE_TIME + timedelta(minutes=minute),
            ))
    await session.flush()

    session.add_all([
        models.PostLike(post_id="bob-0", user_id="alice"),
        models.PostLike(post_id="bob-0", user_id="carol"),
        models.Comment(id="c1", post_id="bob-0", user_id="alice", content="Nice!",
                       created_at=BASE_TIME + timedelta(hours=1)),
    ])
    await session.commit()
    return {"alice": alice, "bob": bob, "carol": carol, "dave": dave}
