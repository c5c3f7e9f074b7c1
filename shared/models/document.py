"""Pydantic models for documents and their revisions.

Hierarchy:
  User     : author reference embedded in a document.
  Document : the cached entity, merged in place on every sighting.
  Revision : server side snapshot, only used as input to a restore.
"""

from datetime import datetime, timezone

from pydantic import field_validator

from shared.models.entity import Entity


def _as_utc(value: datetime | None) -> datetime | None:
    """Timestamps without an offset are taken as UTC, so all of them compare."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(Entity):
    name: str | None = None
    avatar_url: str | None = None


class Document(Entity):
    """A single document as returned by the documents.* endpoints.

    `published_at` is None for drafts. `url_id` is the short alias that
    appears at the end of the document url.
    """

    url_id: str = ""
    url: str | None = None
    title: str = ""
    text: str = ""
    collection_id: str | None = None
    parent_document_id: str | None = None
    created_by: User | None = None
    pinned: bool = False
    starred: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None

    normalize_timestamps = field_validator("created_at", "updated_at", "published_at")(_as_utc)

    @property
    def is_draft(self) -> bool:
        return self.published_at is None


class Revision(Entity):
    document_id: str
    title: str | None = None
    text: str | None = None
    created_at: datetime | None = None
    created_by: User | None = None

    normalize_timestamps = field_validator("created_at")(_as_utc)
