"""Search result model held by the documents store's search cache."""

from pydantic import BaseModel

from shared.models.document import Document


class SearchResult(BaseModel):
    """A single search hit.

    `document` is the live instance from the documents store, never a copy, so
    later updates of the document show up in cached results.
    """

    document: Document
    ranking: float = 0.0
    context: str = ""
