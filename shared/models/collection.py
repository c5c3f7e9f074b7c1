"""Pydantic models for collections and the document tree they cache."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shared.models.entity import Entity


class NavigationNode(BaseModel):
    """One document entry of a collection's navigation tree."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    url: str | None = None
    children: list["NavigationNode"] = []


class Collection(Entity):
    """A collection with its own cached copy of the titles and urls of its documents."""

    name: str = ""
    url: str | None = None
    documents: list[NavigationNode] = []

    def find_node(self, document_id: str) -> NavigationNode | None:
        """
        Depth first lookup of a document in the navigation tree.

        Args:
            document_id (str): The id of the document.

        Returns:
            NavigationNode | None: The node, or None if the collection does not list the document.
        """
        stack = list(reversed(self.documents))
        while stack:
            node = stack.pop()
            if node.id == document_id:
                return node
            stack.extend(reversed(node.children))
        return None
