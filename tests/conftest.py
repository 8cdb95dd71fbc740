import mongomock
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from emulation.config import Settings
from emulation.main import create_app
from emulation.store import MongoStore, SqlStore

ADMIN_PASSWORD = "admin123"


def make_store(kind: str, **kwargs):
    if kind == "sql":
        return SqlStore("sqlite://", admin_password=ADMIN_PASSWORD, **kwargs)
    return MongoStore(mongomock.MongoClient(), "emulation_test", admin_password=ADMIN_PASSWORD, **kwargs)


@pytest.fixture(name="store", params=["sql", "mongo"])
def store_fixture(request):
    store = make_store(request.param)
    store.initialize()
    yield store
    store.close()


@pytest_asyncio.fixture(name="client")
async def client_fixture(store):
    app = create_app(store=store, app_settings=Settings(SECRET_KEY="test-secret", LOG_LEVEL="WARNING"))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

