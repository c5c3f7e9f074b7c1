from operator import attrgetter
from typing import TYPE_CHECKING, Any

import httpx

from shared.clients.api.ApiClientInterface import ApiClientInterface
from shared.clients.api.exceptions import ApiRequestError, ContractViolationError
from shared.clients.api.models.ApiResponse import ApiResponse, PaginationParams
from shared.helper.HelperConfig import HelperConfig
from shared.helper.natural_sort import natural_sort
from shared.models.collection import Collection
from shared.models.document import Document, Revision
from shared.models.search import SearchResult
from shared.stores.BaseStore import BaseStore

if TYPE_CHECKING:
    from shared.stores.RootStore import RootStore

NAMED_PAGES = ("list", "viewed", "starred", "drafts", "pinned")

PaginationOptions = PaginationParams | dict[str, Any] | None


def _order_by(documents: list[Document], field: str, direction: str = "desc") -> list[Document]:
    """Stable sort by a document attribute. Documents without a value go last."""
    present = [document for document in documents if getattr(document, field) is not None]
    missing = [document for document in documents if getattr(document, field) is None]
    return sorted(present, key=attrgetter(field), reverse=direction == "desc") + missing


class DocumentsStore(BaseStore[Document]):
    """
    Canonical cache of all documents seen so far, with derived listings and a per-query search cache.

    Every view is recomputed from the cache on each access, so it always reflects the
    current state of the cached instances.
    """

    def __init__(self, helper_config: HelperConfig, client: ApiClientInterface, root_store: "RootStore"):
        super().__init__(helper_config=helper_config, client=client)
        self._root_store = root_store
        self.recently_viewed_ids: list[str] = []
        self.search_cache: dict[str, list[SearchResult]] = {}

    def _get_model_class(self) -> type[Document]:
        return Document

    def _get_endpoint_prefix(self) -> str:
        return "documents"

    ##########################################
    ################# VIEWS ##################
    ##########################################

    @property
    def recently_viewed(self) -> list[Document]:
        documents = [self.data[document_id] for document_id in self.recently_viewed_ids if document_id in self.data]
        return _order_by(documents, "updated_at", "desc")

    @property
    def recently_updated(self) -> list[Document]:
        return _order_by(self.ordered_data, "updated_at", "desc")

    def created_by_user(self, user_id: str) -> list[Document]:
        documents = [
            document for document in self.ordered_data
            if document.created_by is not None and document.created_by.id == user_id
        ]
        return _order_by(documents, "updated_at", "desc")

    def published_in_collection(self, collection_id: str) -> list[Document]:
        """Documents of a collection, drafts excluded, in first-seen order."""
        return [
            document for document in self.ordered_data
            if document.collection_id == collection_id and document.published_at is not None
        ]

    def pinned_in_collection(self, collection_id: str) -> list[Document]:
        return [document for document in self.recently_updated_in_collection(collection_id) if document.pinned]

    def least_recently_updated_in_collection(self, collection_id: str) -> list[Document]:
        return _order_by(self.published_in_collection(collection_id), "updated_at", "asc")

    def recently_updated_in_collection(self, collection_id: str) -> list[Document]:
        return _order_by(self.published_in_collection(collection_id), "updated_at", "desc")

    def recently_published_in_collection(self, collection_id: str) -> list[Document]:
        return _order_by(self.published_in_collection(collection_id), "published_at", "desc")

    def alphabetical_in_collection(self, collection_id: str) -> list[Document]:
        return natural_sort(self.published_in_collection(collection_id), key=attrgetter("title"))

    def search_results(self, query: str) -> list[SearchResult]:
        """The merged result pages fetched so far for a query, empty if it was never searched."""
        return self.search_cache.get(query, [])

    @property
    def starred(self) -> list[Document]:
        return [document for document in self.ordered_data if document.starred]

    @property
    def starred_alphabetical(self) -> list[Document]:
        return natural_sort(self.starred, key=attrgetter("title"))

    @property
    def drafts(self) -> list[Document]:
        return [document for document in self.recently_updated if document.is_draft]

    @property
    def active(self) -> Document | None:
        active_id = self._root_store.ui.active_document_id
        return self.get(active_id) if active_id else None

    def get_by_url(self, url: str = "") -> Document | None:
        """
        Finds a cached document whose url alias ends the given url or path.

        Args:
            url (str): A document url, path or bare url alias.

        Returns:
            Document | None: The first matching document in first-seen order.
        """
        for document in self.ordered_data:
            if document.url_id and url.endswith(document.url_id):
                return document
        return None

    def get_collection_for_document(self, document: Document) -> Collection | None:
        if not document.collection_id:
            return None
        return self._root_store.collections.get(document.collection_id)

    ##########################################
    ########### NAMED PAGE FETCHES ###########
    ##########################################

    async def fetch_named_page(self, request: str = "list", options: PaginationOptions = None) -> list[dict[str, Any]]:
        """
        Fetches one page of a named document listing and merges it into the cache.

        Args:
            request (str): The listing, one of "list", "viewed", "starred", "drafts", "pinned".
            options (PaginationParams | dict | None): Pagination and sort parameters.

        Returns:
            list[dict]: The raw documents of the page.

        Raises:
            ValueError: If the listing name is unknown.
            ContractViolationError: If the response carries no document list.
        """
        if request not in NAMED_PAGES:
            raise ValueError(f"Unknown document listing '{request}'. Expected one of {NAMED_PAGES}.")

        self.is_fetching = True
        try:
            res = await self._client.post(self._get_endpoint(request), self._to_params(options))
            data = self._require_data(res, "Document list not available")
            for item in data:
                self.add(item)
            self.is_loaded = True
            self.logging.info("Fetched %d documents from listing '%s', %d documents cached", len(data), request, len(self.data))
            return data
        finally:
            self.is_fetching = False

    async def fetch_recently_updated(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("list", options)

    async def fetch_alphabetical(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("list", self._to_params(options, sort="title", direction="ASC"))

    async def fetch_least_recently_updated(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("list", self._to_params(options, sort="updatedAt", direction="ASC"))

    async def fetch_recently_published(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("list", self._to_params(options, sort="publishedAt", direction="DESC"))

    async def fetch_recently_viewed(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        """
        Fetches the viewed listing and appends unseen ids to recently_viewed_ids.

        Ids already in the list keep their position.
        """
        data = await self.fetch_named_page("viewed", options)
        known = set(self.recently_viewed_ids)
        for item in data:
            document_id = item.get("id")
            if document_id is not None and document_id not in known:
                self.recently_viewed_ids.append(document_id)
                known.add(document_id)
        return data

    async def fetch_starred(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("starred", options)

    async def fetch_drafts(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("drafts", options)

    async def fetch_pinned(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("pinned", options)

    async def fetch_owned(self, options: PaginationOptions = None) -> list[dict[str, Any]]:
        return await self.fetch_named_page("list", options)

    ##########################################
    ################ SEARCH ##################
    ##########################################

    async def search(self, query: str, options: PaginationOptions = None) -> list[dict[str, Any]]:
        """
        Runs a full text search and merges the result page into the search cache of the query.

        The page overwrites the cached results from position `offset` on and extends the
        cached sequence where it runs past its end. Other positions are left untouched.

        Args:
            query (str): The search query, also the cache key.
            options (PaginationParams | dict | None): offset and limit of the page (both default to 0).

        Returns:
            list[dict]: The raw search results of the page.

        Raises:
            ContractViolationError: If the response carries no result list.
        """
        params = self._to_params(options)
        res = await self._client.get(self._get_endpoint("search"), {**params, "query": query})
        data = self._require_data(res, "Search response should be available")

        for result in data:
            self.add(result["document"])

        # keep references to the cached documents, not the raw payloads
        results: list[SearchResult] = []
        for result in data:
            document = self.get(result["document"].get("id"))
            if document is None:
                continue
            results.append(SearchResult(document=document, ranking=result.get("ranking", 0.0), context=result.get("context", "")))

        offset = params.get("offset") or 0
        limit = params.get("limit") or 0
        merged = self._merge_search_page(query, offset, results)
        self.logging.info(
            "Search %r returned %d results for offset %d limit %d, %d results cached",
            query[:80],
            len(results),
            offset,
            limit,
            len(merged),
        )
        return data

    def _merge_search_page(self, query: str, offset: int, results: list[SearchResult]) -> list[SearchResult]:
        """
        Writes a result page into the cached sequence of a query, starting at offset.

        A page starting past the end of the sequence is appended to it. The sequence never shrinks.
        """
        existing = self.search_cache.setdefault(query, [])
        start = min(offset, len(existing))
        for index, result in enumerate(results):
            position = start + index
            if position < len(existing):
                existing[position] = result
            else:
                existing.append(result)
        return existing

    ##########################################
    ############ SINGLE DOCUMENTS ############
    ##########################################

    async def prefetch_document(self, document_id: str) -> Document | None:
        """
        Loads a document in the background unless it is cached already.

        Concurrent calls for the same uncached id are not coalesced; each one issues a request.

        Returns:
            Document | None: The fetched document, or None if nothing was fetched.
        """
        if document_id not in self.data:
            return await self.fetch(document_id, prefetch=True)
        return None

    async def fetch(self, document_id: str, share_id: str | None = None, prefetch: bool = False) -> Document:
        """
        Returns a document from the cache, or fetches it if it is not cached.

        Args:
            document_id (str): The document id, or a url ending in the document's url alias.
            share_id (str | None): Share token giving access to the document.
            prefetch (bool): Background load, leaves the is_fetching flag alone.

        Returns:
            Document: The live cached instance.

        Raises:
            ContractViolationError: If the response carries no document.
        """
        if not prefetch:
            self.is_fetching = True
        try:
            document = self.get(document_id) or self.get_by_url(document_id)
            if document is not None:
                self.logging.debug("Document %s served from cache", document_id)
                return document

            body: dict[str, Any] = {"id": document_id}
            if share_id:
                body["shareId"] = share_id
            res = await self._client.post(self._get_endpoint("info"), body)
            data = self._require_data(res, "Document not available")
            document = self.add(data)
            self.is_loaded = True
            return document
        finally:
            if not prefetch:
                self.is_fetching = False

    ##########################################
    ############### MUTATIONS ################
    ##########################################

    async def move(self, document: Document, parent_document_id: str | None) -> Document:
        """
        Moves a document below another document, or to the collection root if parent_document_id is None.

        Returns:
            Document: The live cached instance, updated with the server's answer.
        """
        res = await self._client.post(self._get_endpoint("move"), {
            "id": document.id,
            "parentDocument": parent_document_id,
        })
        data = self._require_data(res, "Data not available")
        await self._refresh_collection(document)
        return self.add(data)

    async def duplicate(self, document: Document) -> Document:
        """
        Creates a published copy of a document next to the original.

        Returns:
            Document: The new cached document.
        """
        res = await self._client.post(self._get_endpoint("create"), {
            "publish": True,
            "parentDocument": document.parent_document_id,
            "collection": document.collection_id,
            "title": f"{document.title} (duplicate)",
            "text": document.text,
        })
        data = self._require_data(res, "Data should be available")
        await self._refresh_collection(document)
        return self.add(data)

    async def update(self, params: dict[str, Any]) -> Document:
        document = await super().update(params)

        # the collection keeps its own copy of title and url
        self._root_store.collections.update_document(document)
        return document

    async def delete(self, document: Document) -> None:
        await super().delete(document)
        self.recently_viewed_ids = [document_id for document_id in self.recently_viewed_ids if document_id != document.id]
        await self._refresh_collection(document)

    async def restore(self, document: Document, revision: Revision) -> Document:
        """
        Restores a document to a revision. The snapshot is merged into the given instance.

        Returns:
            Document: The same instance that was passed in.

        Raises:
            ContractViolationError: If the response carries no document.
        """
        res = await self._client.post(self._get_endpoint("restore"), {
            "id": document.id,
            "revisionId": revision.id,
        })
        data = self._require_data(res, "Data should be available")
        document.update_from_json(data)
        return document

    # pin and star only tell the backend; callers flip the local flags themselves
    async def pin(self, document: Document) -> ApiResponse:
        return await self._client.post(self._get_endpoint("pin"), {"id": document.id})

    async def unpin(self, document: Document) -> ApiResponse:
        return await self._client.post(self._get_endpoint("unpin"), {"id": document.id})

    async def star(self, document: Document) -> ApiResponse:
        return await self._client.post(self._get_endpoint("star"), {"id": document.id})

    async def unstar(self, document: Document) -> ApiResponse:
        return await self._client.post(self._get_endpoint("unstar"), {"id": document.id})

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _refresh_collection(self, document: Document) -> None:
        """
        Re-fetches the collection of a document after a structural change.

        Failures are logged and do not fail the change itself.
        """
        collection = self.get_collection_for_document(document)
        if collection is None:
            return
        try:
            await self._root_store.collections.refresh(collection.id)
        except (ApiRequestError, ContractViolationError, httpx.HTTPError) as e:
            self.logging.warning("Could not refresh collection %s after changing document %s: %s", collection.id, document.id, e)

    @staticmethod
    def _to_params(options: PaginationOptions, **defaults: Any) -> dict[str, Any]:
        """Merges caller options over default parameters, dropping unset values."""
        if isinstance(options, PaginationParams):
            given = options.to_body()
        else:
            given = {key: value for key, value in (options or {}).items() if value is not None}
        return {**defaults, **given}
