import pytest
from fastapi.testclient import TestClient

import fakeredis
import fakeredis.aioredis

from recipebox.main import app, limiter
from recipebox.infra import redis_client
from recipebox.infra.kv_store import KeyValueStore
from recipebox.services.repository import RecipeRepository
from recipebox.services.timers import registry


@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    server = fakeredis.FakeServer()
    # Create fake clients sharing the same server
    async_redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    sync_redis = fakeredis.FakeRedis(server=server, decode_responses=True)

    # Force the clients into the infra module
    redis_client._redis_async = async_redis
    redis_client._redis_sync = sync_redis

    yield sync_redis

    # Cleanup
    registry.shutdown()
    redis_client._redis_async = None
    redis_client._redis_sync = None


@pytest.fixture(autouse=True, scope="session")
def _disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store():
    return KeyValueStore(prefix="")


@pytest.fixture
def repo(store):
    return RecipeRepository(store)


@pytest.fixture
def logged_in(client):
    """Log in locally as a@x.com."""
    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw"})
    assert resp.status_code == 200
    return "a@x.com"
