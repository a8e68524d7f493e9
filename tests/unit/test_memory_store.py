# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the in-memory entity store."""

import asyncio

import pytest

from schoolhub.infrastructure.store import (
    DuplicateEntityError,
    EntityKind,
    EntityNotFoundError,
    InMemoryEntityStore,
    VersionConflictError,
)


class TestInsert:
    """Tests for InMemoryEntityStore.insert."""

    @pytest.mark.asyncio
    async def test_insert_assigns_store_fields(self, store: InMemoryEntityStore) -> None:
        """Test that insert assigns id, version and timestamps."""
        document = await store.insert(EntityKind.SCHOOL, {"name": "North High"})

        assert document["id"]
        assert document["version"] == 1
        assert document["created_at"] == document["updated_at"]
        assert document["name"] == "North High"

    @pytest.mark.asyncio
    async def test_insert_ignores_reserved_fields(self, store: InMemoryEntityStore) -> None:
        """Test that callers cannot choose id or version."""
        document = await store.insert(
            EntityKind.SCHOOL,
            {"name": "North High", "id": "chosen", "version": 42},
        )

        assert document["id"] != "chosen"
        assert document["version"] == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, store: InMemoryEntityStore) -> None:
        """Test the identity email uniqueness constraint."""
        await store.insert(EntityKind.IDENTITY, {"email": "a@school.test"})

        with pytest.raises(DuplicateEntityError) as exc_info:
            await store.insert(EntityKind.IDENTITY, {"email": "a@school.test"})

        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_returned_document_is_a_copy(self, store: InMemoryEntityStore) -> None:
        """Test that mutating a returned document does not touch the store."""
        document = await store.insert(EntityKind.SCHOOL, {"name": "North High"})
        document["name"] = "Changed"

        stored = await store.find_by_id(EntityKind.SCHOOL, document["id"])

        assert stored["name"] == "North High"


class TestFind:
    """Tests for lookups."""

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, store: InMemoryEntityStore) -> None:
        """Test that a missing id raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError) as exc_info:
            await store.find_by_id(EntityKind.STUDENT, "missing")

        assert exc_info.value.kind is EntityKind.STUDENT
        assert exc_info.value.entity_id == "missing"

    @pytest.mark.asyncio
    async def test_find_filters_and_orders(self, store: InMemoryEntityStore) -> None:
        """Test equality filters and creation ordering."""
        first = await store.insert(EntityKind.STUDENT, {"name": "Ada", "school_id": "a"})
        await store.insert(EntityKind.STUDENT, {"name": "Bob", "school_id": "b"})
        third = await store.insert(EntityKind.STUDENT, {"name": "Cy", "school_id": "a"})

        result = await store.find(EntityKind.STUDENT, school_id="a")

        assert [document["id"] for document in result] == [first["id"], third["id"]]

    @pytest.mark.asyncio
    async def test_find_without_filters_returns_all(self, store: InMemoryEntityStore) -> None:
        """Test that no filters returns every document of the kind."""
        await store.insert(EntityKind.SCHOOL, {"name": "A"})
        await store.insert(EntityKind.SCHOOL, {"name": "B"})
        await store.insert(EntityKind.STUDENT, {"name": "C"})

        assert len(await store.find(EntityKind.SCHOOL)) == 2


class TestUpdateFields:
    """Tests for InMemoryEntityStore.update_fields."""

    @pytest.mark.asyncio
    async def test_update_bumps_version(self, store: InMemoryEntityStore) -> None:
        """Test that every update increments the version."""
        document = await store.insert(EntityKind.STUDENT, {"name": "Ada", "age": 10})

        updated = await store.update_fields(EntityKind.STUDENT, document["id"], {"age": 11})

        assert updated["age"] == 11
        assert updated["name"] == "Ada"
        assert updated["version"] == 2
        assert updated["updated_at"] >= document["updated_at"]

    @pytest.mark.asyncio
    async def test_update_with_matching_version(self, store: InMemoryEntityStore) -> None:
        """Test a conditional update at the current version."""
        document = await store.insert(EntityKind.STUDENT, {"name": "Ada"})

        updated = await store.update_fields(
            EntityKind.STUDENT, document["id"], {"name": "Ada L."}, expected_version=1
        )

        assert updated["version"] == 2

    @pytest.mark.asyncio
    async def test_update_with_stale_version(self, store: InMemoryEntityStore) -> None:
        """Test that a stale expected version is refused and nothing changes."""
        document = await store.insert(EntityKind.STUDENT, {"name": "Ada"})
        await store.update_fields(EntityKind.STUDENT, document["id"], {"name": "B"})

        with pytest.raises(VersionConflictError) as exc_info:
            await store.update_fields(
                EntityKind.STUDENT, document["id"], {"name": "C"}, expected_version=1
            )

        assert exc_info.value.expected_version == 1
        stored = await store.find_by_id(EntityKind.STUDENT, document["id"])
        assert stored["name"] == "B"
        assert stored["version"] == 2

    @pytest.mark.asyncio
    async def test_update_missing(self, store: InMemoryEntityStore) -> None:
        """Test that updating a missing document raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            await store.update_fields(EntityKind.STUDENT, "missing", {"name": "x"})

    @pytest.mark.asyncio
    async def test_update_cannot_change_id(self, store: InMemoryEntityStore) -> None:
        """Test that reserved fields are ignored on update."""
        document = await store.insert(EntityKind.SCHOOL, {"name": "A"})

        updated = await store.update_fields(
            EntityKind.SCHOOL, document["id"], {"id": "other", "version": 99}
        )

        assert updated["id"] == document["id"]
        assert updated["version"] == 2

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, store: InMemoryEntityStore) -> None:
        """Test that an update cannot steal another identity's email."""
        await store.insert(EntityKind.IDENTITY, {"email": "a@school.test"})
        other = await store.insert(EntityKind.IDENTITY, {"email": "b@school.test"})

        with pytest.raises(DuplicateEntityError):
            await store.update_fields(
                EntityKind.IDENTITY, other["id"], {"email": "a@school.test"}
            )

    @pytest.mark.asyncio
    async def test_update_keeping_own_email(self, store: InMemoryEntityStore) -> None:
        """Test that rewriting the same email is not a duplicate."""
        identity = await store.insert(EntityKind.IDENTITY, {"email": "a@school.test"})

        updated = await store.update_fields(
            EntityKind.IDENTITY, identity["id"], {"email": "a@school.test"}
        )

        assert updated["version"] == 2

    @pytest.mark.asyncio
    async def test_concurrent_conditional_updates(self, store: InMemoryEntityStore) -> None:
        """Test that only one of two writers at the same version wins."""
        document = await store.insert(EntityKind.STUDENT, {"school_id": "a"})

        results = await asyncio.gather(
            store.update_fields(
                EntityKind.STUDENT, document["id"], {"school_id": "b"}, expected_version=1
            ),
            store.update_fields(
                EntityKind.STUDENT, document["id"], {"school_id": "c"}, expected_version=1
            ),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, VersionConflictError)]
        successes = [r for r in results if isinstance(r, dict)]
        assert len(conflicts) == 1
        assert len(successes) == 1
        stored = await store.find_by_id(EntityKind.STUDENT, document["id"])
        assert stored["school_id"] == successes[0]["school_id"]
        assert stored["version"] == 2


class TestDelete:
    """Tests for InMemoryEntityStore.delete."""

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryEntityStore) -> None:
        """Test that a deleted document is gone."""
        document = await store.insert(EntityKind.CLASSROOM, {"name": "5A"})

        await store.delete(EntityKind.CLASSROOM, document["id"])

        with pytest.raises(EntityNotFoundError):
            await store.find_by_id(EntityKind.CLASSROOM, document["id"])

    @pytest.mark.asyncio
    async def test_delete_with_stale_version(self, store: InMemoryEntityStore) -> None:
        """Test that a stale conditional delete keeps the document."""
        document = await store.insert(EntityKind.CLASSROOM, {"name": "5A"})
        await store.update_fields(EntityKind.CLASSROOM, document["id"], {"name": "5B"})

        with pytest.raises(VersionConflictError):
            await store.delete(EntityKind.CLASSROOM, document["id"], expected_version=1)

        assert (await store.find_by_id(EntityKind.CLASSROOM, document["id"]))["name"] == "5B"

    @pytest.mark.asyncio
    async def test_delete_missing(self, store: InMemoryEntityStore) -> None:
        """Test that deleting a missing document raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            await store.delete(EntityKind.CLASSROOM, "missing")
