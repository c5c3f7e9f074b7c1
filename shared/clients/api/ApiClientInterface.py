from abc import abstractmethod
from typing import Any

import httpx

from shared.clients.ClientInterface import ClientInterface
from shared.clients.api.models.ApiResponse import ApiResponse
from shared.helper.HelperConfig import HelperConfig


class ApiClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(helper_config=helper_config, transport=transport)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "api"
        """
        return "api"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_method(self, method: str) -> str:
        """
        Returns the endpoint path for an rpc style api method.

        Args:
            method (str): The api method, e.g. "documents.list" (a leading slash is allowed).

        Returns:
            str: The endpoint path (e.g. "/api/documents.list")
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def post(self, path: str, body: dict[str, Any] | None = None) -> ApiResponse:
        """
        Calls an api method with a json body.

        Args:
            path (str): The api method, e.g. "documents.info".
            body (dict | None): The request body, sent as is (None values become null).

        Returns:
            ApiResponse: The decoded response.

        Raises:
            ApiRequestError: If the backend answers with a non-2xx status.
            httpx.HTTPError: If the request fails on the transport level.
        """
        resp = await self.do_request(method="POST", endpoint=self._get_endpoint_method(path), json=body or {}, raise_on_error=True)
        return self._parse_response(resp)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> ApiResponse:
        """
        Calls an api method with query parameters.

        Args:
            path (str): The api method, e.g. "documents.search".
            params (dict | None): The query parameters. Keys with None values are dropped.

        Returns:
            ApiResponse: The decoded response.

        Raises:
            ApiRequestError: If the backend answers with a non-2xx status.
            httpx.HTTPError: If the request fails on the transport level.
        """
        query = {key: value for key, value in (params or {}).items() if value is not None}
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_method(path), params=query, raise_on_error=True)
        return self._parse_response(resp)

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def _parse_response(self, response: httpx.Response) -> ApiResponse:
        """
        Parses a raw http response of the backend into an ApiResponse.

        Args:
            response (httpx.Response): The raw response.

        Returns:
            ApiResponse: The parsed response. Its data is None if the payload carried none.
        """
        pass
