# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process entity store.

Used for development and tests. A single asyncio lock guards every
read-modify-write, so version checks and unique checks are atomic with
respect to other coroutines on the same event loop.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from schoolhub.infrastructure.store.base import (
    Document,
    DuplicateEntityError,
    EntityKind,
    EntityNotFoundError,
    EntityStore,
    VersionConflictError,
    writable_fields,
)

logger = logging.getLogger(__name__)


class InMemoryEntityStore(EntityStore):
    """Dictionary-backed store.

    Documents are copied on the way in and on the way out, so callers never
    hold a reference into the store.

    Attributes:
        UNIQUE_FIELDS: Unique constraints per kind.
    """

    UNIQUE_FIELDS: dict[EntityKind, tuple[str, ...]] = {
        EntityKind.IDENTITY: ("email",),
    }

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._documents: dict[EntityKind, dict[str, Document]] = {
            kind: {} for kind in EntityKind
        }
        self._lock = asyncio.Lock()

    async def find_by_id(self, kind: EntityKind, entity_id: str) -> Document:
        document = self._documents[kind].get(entity_id)
        if document is None:
            raise EntityNotFoundError(kind, entity_id)
        return dict(document)

    async def find(self, kind: EntityKind, **filters: Any) -> list[Document]:
        matches = [
            dict(document)
            for document in self._documents[kind].values()
            if all(document.get(key) == value for key, value in filters.items())
        ]
        matches.sort(key=lambda document: document["created_at"])
        return matches

    async def insert(self, kind: EntityKind, fields: Document) -> Document:
        async with self._lock:
            values = writable_fields(fields)
            self._check_unique(kind, values)

            now = datetime.now(timezone.utc)
            document = {
                **values,
                "id": str(uuid4()),
                "version": 1,
                "created_at": now,
                "updated_at": now,
            }
            self._documents[kind][document["id"]] = document
            return dict(document)

    async def update_fields(
        self,
        kind: EntityKind,
        entity_id: str,
        fields: Document,
        expected_version: int | None = None,
    ) -> Document:
        async with self._lock:
            current = self._get_checked(kind, entity_id, expected_version)
            values = writable_fields(fields)
            self._check_unique(kind, values, exclude_id=entity_id)

            updated = {
                **current,
                **values,
                "version": current["version"] + 1,
                "updated_at": datetime.now(timezone.utc),
            }
            self._documents[kind][entity_id] = updated
            return dict(updated)

    async def delete(
        self,
        kind: EntityKind,
        entity_id: str,
        expected_version: int | None = None,
    ) -> None:
        async with self._lock:
            self._get_checked(kind, entity_id, expected_version)
            del self._documents[kind][entity_id]

    def _get_checked(
        self,
        kind: EntityKind,
        entity_id: str,
        expected_version: int | None,
    ) -> Document:
        current = self._documents[kind].get(entity_id)
        if current is None:
            raise EntityNotFoundError(kind, entity_id)
        if expected_version is not None and current["version"] != expected_version:
            logger.debug(
                "Version conflict on %s %s: expected %s, found %s",
                kind.value,
                entity_id,
                expected_version,
                current["version"],
            )
            raise VersionConflictError(kind, entity_id, expected_version)
        return current

    def _check_unique(
        self,
        kind: EntityKind,
        values: Document,
        exclude_id: str | None = None,
    ) -> None:
        for field in self.UNIQUE_FIELDS.get(kind, ()):
            if field not in values:
                continue
            for document_id, document in self._documents[kind].items():
                if document_id != exclude_id and document.get(field) == values[field]:
                    raise DuplicateEntityError(kind, field)
