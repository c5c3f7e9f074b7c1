"""Documents router: read access to the document cache and its search cache."""

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from server.models.responses import DocumentItem, DocumentListResponse, SearchResponse
from shared.clients.api.exceptions import ApiRequestError, ContractViolationError
from shared.dependencies.auth import verify_api_key
from shared.stores.DocumentsStore import DocumentsStore

documents_router = APIRouter(dependencies=[Depends(verify_api_key)])


class CollectionOrder(str, Enum):
    recent = "recent"
    oldest = "oldest"
    published = "published"
    alphabetical = "alphabetical"
    pinned = "pinned"


def _get_documents(request: Request) -> DocumentsStore:
    return request.app.state.root_store.documents


def _to_http_error(error: ApiRequestError | ContractViolationError, not_found: str) -> HTTPException:
    """Maps a failed backend call to the HTTP error returned to the caller."""
    if isinstance(error, ApiRequestError) and error.status_code in (403, 404):
        return HTTPException(status_code=404, detail=not_found)
    return HTTPException(status_code=502, detail=str(error))


@documents_router.get("/documents/recent", tags=["Documents"])
async def list_recently_updated(request: Request) -> DocumentListResponse:
    """All cached documents, most recently updated first."""
    return DocumentListResponse.from_documents(_get_documents(request).recently_updated)


@documents_router.get("/documents/viewed", tags=["Documents"])
async def list_recently_viewed(request: Request) -> DocumentListResponse:
    """Fetches the viewed listing, then returns the recently viewed documents."""
    documents = _get_documents(request)
    await documents.fetch_recently_viewed()
    return DocumentListResponse.from_documents(documents.recently_viewed)


@documents_router.get("/documents/starred", tags=["Documents"])
async def list_starred(request: Request, alphabetical: bool = False) -> DocumentListResponse:
    documents = _get_documents(request)
    return DocumentListResponse.from_documents(documents.starred_alphabetical if alphabetical else documents.starred)


@documents_router.get("/documents/drafts", tags=["Documents"])
async def list_drafts(request: Request) -> DocumentListResponse:
    return DocumentListResponse.from_documents(_get_documents(request).drafts)


@documents_router.get("/documents/{document_id}", tags=["Documents"])
async def get_document(request: Request, document_id: str) -> DocumentItem:
    """Returns a document from the cache, fetching it from the backend if needed.

    Args:
        request (Request): The incoming FastAPI request (carries app state).
        document_id (str): Document id or url alias.

    Raises:
        HTTPException: 404 if the backend does not know the document, 502 on any other backend failure.
    """
    try:
        document = await _get_documents(request).fetch(document_id)
    except (ApiRequestError, ContractViolationError) as e:
        raise _to_http_error(e, f"Document '{document_id}' not found.")
    return DocumentItem.from_document(document)


@documents_router.get("/collections/{collection_id}/documents", tags=["Collections"])
async def list_collection_documents(
    request: Request,
    collection_id: str,
    order: CollectionOrder = CollectionOrder.recent,
) -> DocumentListResponse:
    """Published documents of a collection from the cache, in the requested order."""
    documents = _get_documents(request)
    views = {
        CollectionOrder.recent: documents.recently_updated_in_collection,
        CollectionOrder.oldest: documents.least_recently_updated_in_collection,
        CollectionOrder.published: documents.recently_published_in_collection,
        CollectionOrder.alphabetical: documents.alphabetical_in_collection,
        CollectionOrder.pinned: documents.pinned_in_collection,
    }
    return DocumentListResponse.from_documents(views[order](collection_id))


@documents_router.get("/search", tags=["Search"])
async def search_documents(
    request: Request,
    query: str = Query(min_length=1),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=25, ge=1, le=100),
) -> SearchResponse:
    """Runs a search page and returns every result cached so far for the query.

    Raises:
        HTTPException: 502 if the backend fails or its answer lacks the result list.
    """
    request.app.state.logging.info("Search received: query=%r offset=%d limit=%d", query[:80], offset, limit)
    documents = _get_documents(request)
    try:
        await documents.search(query, {"offset": offset, "limit": limit})
    except (ApiRequestError, ContractViolationError) as e:
        raise _to_http_error(e, f"No search results for '{query}'.")
    return SearchResponse.from_results(query, documents.search_results(query))
