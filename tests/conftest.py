import logging

import httpx
import pytest

from shared.clients.api.outline.ApiClientOutline import ApiClientOutline
from shared.helper.HelperConfig import HelperConfig
from shared.stores.RootStore import RootStore
from tests.fakes import FakeBackend

BASE_URL = "https://wiki.test"


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("API_OUTLINE_BASE_URL", BASE_URL)
    monkeypatch.setenv("API_OUTLINE_API_KEY", "secret-token")
    monkeypatch.setenv("APP_API_KEY", "app-key")
    monkeypatch.delenv("API_ENGINES", raising=False)
    monkeypatch.delenv("API_TIMEOUT", raising=False)


@pytest.fixture
def helper_config(env):
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def api_client(helper_config, backend):
    client = ApiClientOutline(helper_config=helper_config, transport=httpx.MockTransport(backend.handle))
    await client.boot()
    yield client
    await client.close()


@pytest.fixture
def root_store(helper_config, api_client):
    return RootStore(helper_config=helper_config, client=api_client)


@pytest.fixture
def documents(root_store):
    return root_store.documents
