"""Base class for entities held in an identity-mapped store."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Entity(BaseModel):
    """
    An entity as sent by the backend. Wire keys are camelCase, attributes snake_case.

    Stores keep exactly one instance per id and merge later sightings into it with
    update_from_json(), so every holder of the instance sees the new values.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str

    def update_from_json(self, raw: dict[str, Any]) -> None:
        """
        Merges a raw payload into this instance, field by field.

        Fields missing from the payload keep their current value. The id never changes.

        Args:
            raw (dict): The raw entity data as returned by the backend.

        Raises:
            pydantic.ValidationError: If a field in the payload has an invalid value.
        """
        merged = type(self).model_validate({**self.model_dump(by_alias=True), **raw, "id": self.id})
        for name in type(self).model_fields:
            value = getattr(merged, name)
            if getattr(self, name) != value:
                setattr(self, name, value)
