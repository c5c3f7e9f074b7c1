import logging

import httpx
import pytest

from shared.clients.api.ApiClientManager import ApiClientManager
from shared.clients.api.exceptions import ApiRequestError
from shared.clients.api.outline.ApiClientOutline import ApiClientOutline
from shared.helper.HelperConfig import HelperConfig


class TestRequests:

    async def test_post_sends_json_body_with_bearer_auth(self, api_client, backend):
        backend.on("documents.info", {"id": "a"})

        res = await api_client.post("documents.info", {"id": "a", "shareId": None})

        request = backend.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://wiki.test/api/documents.info"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert backend.calls_to("documents.info") == [{"id": "a", "shareId": None}]
        assert res.data == {"id": "a"}
        assert res.status == 200

    async def test_leading_slash_in_path_is_accepted(self, api_client, backend):
        backend.on("documents.list", [])
        await api_client.post("/documents.list")
        assert str(backend.requests[0].url) == "https://wiki.test/api/documents.list"

    async def test_get_sends_query_params_without_none_values(self, api_client, backend):
        backend.on("documents.search", [])

        await api_client.get("documents.search", {"query": "tea", "offset": 10, "limit": None})

        assert backend.calls_to("documents.search") == [{"query": "tea", "offset": "10"}]

    async def test_missing_data_field_is_none(self, api_client, backend):
        backend.on("documents.info", body={"ok": True, "status": 200})
        res = await api_client.post("documents.info", {"id": "a"})
        assert res.data is None

    async def test_pagination_is_parsed(self, api_client, backend):
        backend.on("documents.list", body={"data": [], "pagination": {"offset": 25, "limit": 25, "nextPath": "/api/documents.list?offset=50"}})

        res = await api_client.post("documents.list")

        assert res.pagination.offset == 25
        assert res.pagination.next_path == "/api/documents.list?offset=50"

    async def test_error_status_raises_with_server_message(self, api_client, backend):
        backend.on("documents.info", body={"ok": False, "error": "not_found", "message": "Document not found"}, status=404)

        with pytest.raises(ApiRequestError) as excinfo:
            await api_client.post("documents.info", {"id": "missing"})

        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Document not found"

    async def test_transport_errors_propagate_unchanged(self, api_client, backend):
        backend.fail("documents.info", httpx.ConnectError("connection refused"))
        with pytest.raises(httpx.ConnectError):
            await api_client.post("documents.info", {"id": "a"})

    async def test_request_before_boot_raises(self, helper_config):
        client = ApiClientOutline(helper_config=helper_config)
        with pytest.raises(Exception, match="boot"):
            await client.post("documents.list")

    async def test_healthcheck_raises_on_error(self, api_client, backend):
        backend.on("auth.info", status=401, body={"ok": False, "message": "Authentication required"})
        with pytest.raises(ApiRequestError):
            await api_client.do_healthcheck()


class TestConfiguration:

    def test_missing_base_url_is_rejected(self, monkeypatch):
        monkeypatch.delenv("API_OUTLINE_BASE_URL", raising=False)
        with pytest.raises(ValueError, match="API_OUTLINE_BASE_URL"):
            ApiClientOutline(helper_config=HelperConfig(logger=logging.getLogger("tests")))

    def test_no_auth_header_without_api_key(self, env, monkeypatch):
        monkeypatch.delenv("API_OUTLINE_API_KEY")
        client = ApiClientOutline(helper_config=HelperConfig(logger=logging.getLogger("tests")))
        assert client._get_auth_header() == {}

    def test_timeout_from_env(self, env, monkeypatch):
        monkeypatch.setenv("API_TIMEOUT", "2.5")
        client = ApiClientOutline(helper_config=HelperConfig(logger=logging.getLogger("tests")))
        assert client.timeout == 2.5


class TestApiClientManager:

    def test_defaults_to_outline(self, helper_config):
        client = ApiClientManager(helper_config=helper_config).get_client()
        assert isinstance(client, ApiClientOutline)
        assert client.get_engine_name() == "outline"

    def test_unknown_engine_is_rejected(self, helper_config, monkeypatch):
        monkeypatch.setenv("API_ENGINES", "[confluence]")
        with pytest.raises(ValueError, match="Unsupported api engine"):
            ApiClientManager(helper_config=helper_config)

    def test_empty_engine_list_is_rejected(self, helper_config, monkeypatch):
        monkeypatch.setenv("API_ENGINES", "[]")
        with pytest.raises(ValueError, match="No api engines"):
            ApiClientManager(helper_config=helper_config)
