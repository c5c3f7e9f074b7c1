"""Generic api response and request parameter models, backend-independent."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Pagination(BaseModel):
    """
    Pagination info as returned next to a list payload.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    offset: int | None = None
    limit: int | None = None
    next_path: str | None = None


class ApiResponse(BaseModel):
    """
    Represents one decoded response of the backend api. `data` stays None if the payload had no data field.
    """
    status: int
    ok: bool = True
    data: Any = None
    pagination: Pagination | None = None


class PaginationParams(BaseModel):
    """
    Pagination and sort parameters for list and search requests. Unknown keys are passed through to the backend.
    """
    model_config = ConfigDict(extra="allow")

    offset: int | None = None
    limit: int | None = None
    sort: str | None = None
    direction: Literal["ASC", "DESC"] | None = None

    def to_body(self) -> dict[str, Any]:
        """Serialise for a request body, dropping unset values."""
        return self.model_dump(exclude_none=True)
