"""Service test fixtures.

Each test runs against its own SQLite file under pytest's tmp_path, so the
store, the service and the HTTP layer all see real SQL behavior.
"""

from collections.abc import AsyncGenerator

from httpx import ASGITransport, AsyncClient
import pytest

from resource_api.config import Settings
from resource_api.database import Store
from resource_api.main import create_app
from resource_api.services import ResourceService


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'data' / 'resources.db'}"


@pytest.fixture
async def store(database_url) -> AsyncGenerator[Store, None]:
    store = Store(database_url)
    yield store
    await store.close()


@pytest.fixture
async def service(store) -> ResourceService:
    service = ResourceService(store)
    await service.clear_all()
    return service


@pytest.fixture
async def async_client(database_url, store, service) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(settings=Settings(_env_file=None, database_url=database_url), store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
