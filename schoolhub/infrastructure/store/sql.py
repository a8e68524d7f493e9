# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy-backed entity store.

Each operation runs in its own session and transaction. Updates are a
single ``UPDATE ... WHERE id = :id AND version = :expected RETURNING *``
statement, so the version check and the write cannot be separated by
another writer.

Example:
    sessionmaker = await init_database(settings)
    store = SQLAlchemyEntityStore(sessionmaker)
    student = await store.find_by_id(EntityKind.STUDENT, student_id)
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from schoolhub.infrastructure.database.connection import DatabaseError, session_scope
from schoolhub.infrastructure.database.models import (
    ClassroomModel,
    IdentityModel,
    SchoolModel,
    StudentModel,
)
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

TABLES: dict[EntityKind, Table] = {
    EntityKind.SCHOOL: SchoolModel.__table__,
    EntityKind.CLASSROOM: ClassroomModel.__table__,
    EntityKind.STUDENT: StudentModel.__table__,
    EntityKind.IDENTITY: IdentityModel.__table__,
}

UNIQUE_FIELDS: dict[EntityKind, str] = {
    EntityKind.IDENTITY: "email",
}


class SQLAlchemyEntityStore(EntityStore):
    """Entity store over one relational table per kind.

    Attributes:
        _sessionmaker: Factory for async sessions.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            sessionmaker: Session factory returned by init_database().
        """
        self._sessionmaker = sessionmaker

    async def find_by_id(self, kind: EntityKind, entity_id: str) -> Document:
        table = TABLES[kind]
        async with session_scope(self._sessionmaker) as session:
            result = await session.execute(select(table).where(table.c.id == entity_id))
            row = result.mappings().first()

        if row is None:
            raise EntityNotFoundError(kind, entity_id)
        return dict(row)

    async def find(self, kind: EntityKind, **filters: Any) -> list[Document]:
        table = TABLES[kind]
        stmt = select(table).where(
            *(table.c[key] == value for key, value in filters.items())
        ).order_by(table.c.created_at)

        async with session_scope(self._sessionmaker) as session:
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

    async def insert(self, kind: EntityKind, fields: Document) -> Document:
        table = TABLES[kind]
        now = datetime.now(timezone.utc)
        document = {
            **writable_fields(fields),
            "id": str(uuid4()),
            "version": 1,
            "created_at": now,
            "updated_at": now,
        }

        try:
            async with session_scope(self._sessionmaker) as session:
                await session.execute(insert(table).values(**document))
        except DatabaseError as e:
            self._raise_if_duplicate(kind, e)
            raise

        return document

    async def update_fields(
        self,
        kind: EntityKind,
        entity_id: str,
        fields: Document,
        expected_version: int | None = None,
    ) -> Document:
        table = TABLES[kind]
        conditions = [table.c.id == entity_id]
        if expected_version is not None:
            conditions.append(table.c.version == expected_version)

        stmt = (
            update(table)
            .where(*conditions)
            .values(
                **writable_fields(fields),
                version=table.c.version + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(*table.c)
        )

        try:
            async with session_scope(self._sessionmaker) as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
                if row is None:
                    await self._raise_missed(session, kind, entity_id, expected_version)
        except DatabaseError as e:
            self._raise_if_duplicate(kind, e)
            raise

        return dict(row)

    async def delete(
        self,
        kind: EntityKind,
        entity_id: str,
        expected_version: int | None = None,
    ) -> None:
        table = TABLES[kind]
        conditions = [table.c.id == entity_id]
        if expected_version is not None:
            conditions.append(table.c.version == expected_version)

        async with session_scope(self._sessionmaker) as session:
            result = await session.execute(delete(table).where(*conditions))
            if result.rowcount == 0:
                await self._raise_missed(session, kind, entity_id, expected_version)

    async def _raise_missed(
        self,
        session: AsyncSession,
        kind: EntityKind,
        entity_id: str,
        expected_version: int | None,
    ) -> None:
        """Explain why a conditional write matched no row."""
        table = TABLES[kind]
        result = await session.execute(select(table.c.version).where(table.c.id == entity_id))
        if result.scalar_one_or_none() is None or expected_version is None:
            raise EntityNotFoundError(kind, entity_id)
        raise VersionConflictError(kind, entity_id, expected_version)

    @staticmethod
    def _raise_if_duplicate(kind: EntityKind, error: DatabaseError) -> None:
        if isinstance(error.original_error, IntegrityError):
            logger.debug("Integrity violation on %s: %s", kind.value, error.original_error)
            raise DuplicateEntityError(kind, UNIQUE_FIELDS.get(kind)) from error
