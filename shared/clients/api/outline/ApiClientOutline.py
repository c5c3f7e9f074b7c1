import httpx

from shared.clients.api.ApiClientInterface import ApiClientInterface
from shared.clients.api.models.ApiResponse import ApiResponse, Pagination
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class ApiClientOutline(ApiClientInterface):
    def __init__(self, helper_config: HelperConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(helper_config=helper_config, transport=transport)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Outline"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default="")
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return self._get_endpoint_method("auth.info")

    def _get_endpoint_method(self, method: str) -> str:
        return f"/api/{method.strip().lstrip('/')}"

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_response(self, response: httpx.Response) -> ApiResponse:
        body = response.json() if response.content else {}
        if not isinstance(body, dict):
            # bare payloads are treated as the data field itself
            return ApiResponse(status=response.status_code, data=body)

        pagination = body.get("pagination")
        return ApiResponse(
            status=body.get("status", response.status_code),
            ok=body.get("ok", True),
            data=body.get("data"),
            pagination=Pagination(
                offset=pagination.get("offset"),
                limit=pagination.get("limit"),
                next_path=pagination.get("nextPath"),
            ) if isinstance(pagination, dict) else None,
        )
