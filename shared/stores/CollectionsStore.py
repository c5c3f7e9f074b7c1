from shared.models.collection import Collection
from shared.models.document import Document
from shared.stores.BaseStore import BaseStore


class CollectionsStore(BaseStore[Collection]):
    """Collections keep their own copy of document titles and urls for navigation."""

    def _get_model_class(self) -> type[Collection]:
        return Collection

    def _get_endpoint_prefix(self) -> str:
        return "collections"

    async def refresh(self, collection_id: str) -> Collection:
        """
        Re-fetches a collection, including its navigation tree, into the cached instance.

        Args:
            collection_id (str): The id of the collection.

        Returns:
            Collection: The live cached instance.
        """
        collection = await self.fetch_info(collection_id)
        self.logging.debug("Refreshed collection %s (%d top level documents)", collection.id, len(collection.documents))
        return collection

    def update_document(self, document: Document) -> bool:
        """
        Patches title and url of a document in its collection's navigation tree.

        Args:
            document (Document): The updated document.

        Returns:
            bool: True if the collection listed the document and was patched.
        """
        collection = self.get(document.collection_id) if document.collection_id else None
        if collection is None:
            return False
        node = collection.find_node(document.id)
        if node is None:
            return False
        node.title = document.title
        node.url = document.url
        return True
