import httpx

from shared.helper.HelperConfig import HelperConfig
from shared.clients.api.ApiClientInterface import ApiClientInterface


class ApiClientManager:
    """
    Manager class to instantiate the api client configured for the backend.
    """

    def __init__(self, helper_config: HelperConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._transport = transport
        self.clients = self._initialize_clients()

    def _get_engines_from_env(self) -> list[str]:
        """
        Reads the list of api engines from ENV configuration.

        Returns:
            list[str]: A list of engine names, capitalized. E.g. ["Outline"]

        Raises:
            ValueError: If no engines are specified in the configuration.
        """
        engines = self.helper_config.get_list_val("API_ENGINES", default=["outline"])
        if not engines:
            raise ValueError("No api engines specified in configuration.")
        return [engine.strip().lower().capitalize() for engine in engines]

    def _initialize_clients(self) -> list[ApiClientInterface]:
        """
        Initializes api clients based on the engines specified in the configuration.

        Returns:
            list[ApiClientInterface]: The instantiated clients, in configuration order.

        Raises:
            ValueError: If an engine is unknown or no client could be instantiated.
        """
        clients = []
        for engine in self._get_engines_from_env():
            className = f"ApiClient{engine}"
            try:
                module = __import__(
                    f"shared.clients.api.{engine.lower()}.{className}",
                    fromlist=[className],
                )
                client_class = getattr(module, className)
            except (ImportError, AttributeError) as e:
                raise ValueError(f"Unsupported api engine specified: '{engine}'. Error: {e}")
            clients.append(client_class(helper_config=self.helper_config, transport=self._transport))
            self.logging.debug(f"Instantiated api client for engine: {engine}")
        if not clients:
            raise ValueError("No valid api clients could be instantiated from the specified engines.")
        return clients

    def get_client(self) -> ApiClientInterface:
        """
        Returns the primary api client, i.e. the first configured engine.
        """
        return self.clients[0]
