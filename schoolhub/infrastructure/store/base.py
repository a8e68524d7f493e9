# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store interface and errors."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

Document = dict[str, Any]

# Fields the store owns; callers cannot set them through insert/update.
RESERVED_FIELDS = frozenset({"id", "version", "created_at", "updated_at"})


class EntityKind(str, Enum):
    """Kinds of documents held by the store."""

    SCHOOL = "school"
    CLASSROOM = "classroom"
    STUDENT = "student"
    IDENTITY = "identity"


class StoreError(Exception):
    """Base exception for entity store operations."""

    pass


class EntityNotFoundError(StoreError):
    """Raised when a document does not exist.

    Attributes:
        kind: Entity kind looked up.
        entity_id: Missing document id.
    """

    def __init__(self, kind: EntityKind, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.value} {entity_id} not found")


class VersionConflictError(StoreError):
    """Raised when a document changed since the caller read it.

    Attributes:
        kind: Entity kind.
        entity_id: Document id.
        expected_version: Version the caller expected.
    """

    def __init__(self, kind: EntityKind, entity_id: str, expected_version: int) -> None:
        self.kind = kind
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{kind.value} {entity_id} is no longer at version {expected_version}"
        )


class DuplicateEntityError(StoreError):
    """Raised when an insert or update violates a unique field.

    Attributes:
        kind: Entity kind.
        field: Name of the unique field, when known.
    """

    def __init__(self, kind: EntityKind, field: str | None = None) -> None:
        self.kind = kind
        self.field = field
        target = f"{kind.value}.{field}" if field else kind.value
        super().__init__(f"Duplicate value for {target}")


class EntityStore(ABC):
    """Abstract document store.

    Every single-document operation is atomic. There are no transactions
    spanning several documents; callers that need a consistent update use
    ``expected_version`` to detect concurrent writers.
    """

    @abstractmethod
    async def find_by_id(self, kind: EntityKind, entity_id: str) -> Document:
        """Load one document.

        Raises:
            EntityNotFoundError: If no such document exists.
        """
        ...

    @abstractmethod
    async def find(self, kind: EntityKind, **filters: Any) -> list[Document]:
        """Return every document whose fields equal the given filters.

        Results are ordered by creation time.
        """
        ...

    @abstractmethod
    async def insert(self, kind: EntityKind, fields: Document) -> Document:
        """Insert a new document.

        Assigns ``id``, ``version=1`` and timestamps.

        Raises:
            DuplicateEntityError: If a unique field is already taken.
        """
        ...

    @abstractmethod
    async def update_fields(
        self,
        kind: EntityKind,
        entity_id: str,
        fields: Document,
        expected_version: int | None = None,
    ) -> Document:
        """Atomically set fields on one document and bump its version.

        Args:
            kind: Entity kind.
            entity_id: Document id.
            fields: Field values to set.
            expected_version: When given, the update only applies if the
                stored version still equals it.

        Returns:
            The updated document.

        Raises:
            EntityNotFoundError: If no such document exists.
            VersionConflictError: If ``expected_version`` does not match.
            DuplicateEntityError: If a unique field is already taken.
        """
        ...

    @abstractmethod
    async def delete(
        self,
        kind: EntityKind,
        entity_id: str,
        expected_version: int | None = None,
    ) -> None:
        """Delete one document.

        Raises:
            EntityNotFoundError: If no such document exists.
            VersionConflictError: If ``expected_version`` does not match.
        """
        ...


def writable_fields(fields: Document) -> Document:
    """Drop store-owned keys from caller supplied fields."""
    return {key: value for key, value in fields.items() if key not in RESERVED_FIELDS}
