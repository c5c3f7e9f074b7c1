from datetime import datetime

from pydantic import BaseModel

from shared.models.document import Document
from shared.models.search import SearchResult


class DocumentItem(BaseModel):
    id: str
    url_id: str
    url: str | None
    title: str
    collection_id: str | None
    parent_document_id: str | None
    pinned: bool
    starred: bool
    updated_at: datetime | None
    published_at: datetime | None

    @classmethod
    def from_document(cls, document: Document) -> "DocumentItem":
        return cls(**document.model_dump(include=set(cls.model_fields)))


class DocumentListResponse(BaseModel):
    documents: list[DocumentItem]
    total: int

    @classmethod
    def from_documents(cls, documents: list[Document]) -> "DocumentListResponse":
        return cls(documents=[DocumentItem.from_document(document) for document in documents], total=len(documents))


class SearchResultItem(BaseModel):
    ranking: float
    context: str
    document: DocumentItem


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultItem]
    total: int

    @classmethod
    def from_results(cls, query: str, results: list[SearchResult]) -> "SearchResponse":
        items = [
            SearchResultItem(ranking=result.ranking, context=result.context, document=DocumentItem.from_document(result.document))
            for result in results
        ]
        return cls(query=query, results=items, total=len(items))
