from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from shared.clients.api.ApiClientInterface import ApiClientInterface
from shared.clients.api.exceptions import ContractViolationError
from shared.clients.api.models.ApiResponse import ApiResponse
from shared.helper.HelperConfig import HelperConfig
from shared.models.entity import Entity

T = TypeVar("T", bound=Entity)


class BaseStore(ABC, Generic[T]):
    """
    Identity map of one entity type, filled from the backend api.

    There is exactly one instance per id. Later sightings of an id are merged into the
    existing instance instead of replacing it, so references held elsewhere stay live.
    """

    def __init__(self, helper_config: HelperConfig, client: ApiClientInterface):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._client = client

        # cache, in first-seen order
        self.data: dict[str, T] = {}

        # flags
        self.is_fetching: bool = False
        self.is_loaded: bool = False
        self.is_saving: bool = False

    ##########################################
    ################ GETTER ##################
    ##########################################

    @abstractmethod
    def _get_model_class(self) -> type[T]:
        """
        Returns the entity class held by the store. E.g. Document
        """
        pass

    @abstractmethod
    def _get_endpoint_prefix(self) -> str:
        """
        Returns the api namespace of the entity. E.g. "documents"
        """
        pass

    def _get_endpoint(self, action: str) -> str:
        """
        Returns:
            str: The api method for an action on the entity. E.g. "documents.info"
        """
        return f"{self._get_endpoint_prefix()}.{action}"

    @property
    def ordered_data(self) -> list[T]:
        """All cached entities in the order they were first seen."""
        return list(self.data.values())

    ##########################################
    ################# CACHE ##################
    ##########################################

    def add(self, item: dict[str, Any] | T) -> T:
        """
        Adds an entity to the cache or merges it into the cached instance with the same id.

        Args:
            item (dict | T): The raw entity data as returned by the backend, or an entity instance.

        Returns:
            T: The live cached instance.

        Raises:
            pydantic.ValidationError: If the raw data is not a valid entity.
        """
        model_class = self._get_model_class()
        entity_id = item.id if isinstance(item, model_class) else item.get("id")
        existing = self.data.get(entity_id) if entity_id is not None else None

        if existing is None:
            entity = item if isinstance(item, model_class) else model_class.model_validate(item)
            self.data[entity.id] = entity
            return entity

        if existing is not item:
            raw = item.model_dump(by_alias=True) if isinstance(item, model_class) else item
            existing.update_from_json(raw)
        return existing

    def get(self, entity_id: str) -> T | None:
        return self.data.get(entity_id)

    def remove(self, entity_id: str) -> None:
        self.data.pop(entity_id, None)

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def fetch_info(self, entity_id: str, **params: Any) -> T:
        """
        Fetches a single entity and merges it into the cache.

        Args:
            entity_id (str): The id of the entity.
            **params: Additional body parameters for the info request.

        Returns:
            T: The live cached instance.

        Raises:
            ContractViolationError: If the response carries no data.
        """
        res = await self._client.post(self._get_endpoint("info"), {"id": entity_id, **params})
        data = self._require_data(res, f"{self._get_model_class().__name__} not available")
        return self.add(data)

    async def update(self, params: dict[str, Any]) -> T:
        """
        Saves changed fields of an entity and merges the server's answer into the cache.

        Args:
            params (dict): The update body, must contain the entity id.

        Returns:
            T: The live cached instance.

        Raises:
            ContractViolationError: If the response carries no data.
        """
        self.is_saving = True
        try:
            res = await self._client.post(self._get_endpoint("update"), params)
            data = self._require_data(res, "Data should be available")
            return self.add(data)
        finally:
            self.is_saving = False

    async def delete(self, entity: T) -> None:
        """
        Deletes an entity on the backend, then drops it from the cache.

        Args:
            entity (T): The entity to delete.
        """
        self.is_saving = True
        try:
            await self._client.post(self._get_endpoint("delete"), {"id": entity.id})
            self.remove(entity.id)
        finally:
            self.is_saving = False

    ##########################################
    ############### HELPERS ##################
    ##########################################

    @staticmethod
    def _require_data(res: ApiResponse | None, message: str) -> Any:
        """
        Returns the data field of a response.

        Raises:
            ContractViolationError: If the response or its data field is missing.
        """
        if res is None or res.data is None:
            raise ContractViolationError(message)
        return res.data
