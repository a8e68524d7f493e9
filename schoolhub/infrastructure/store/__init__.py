# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store adapter.

Documents are plain dictionaries keyed by string id. Each document carries
a ``version`` that every update bumps, which lets callers perform
compare-and-swap updates without cross-document transactions.

Exports:
    EntityStore: Abstract interface.
    InMemoryEntityStore: Process-local backend.
    SQLAlchemyEntityStore: Relational backend.
"""

from schoolhub.infrastructure.store.base import (
    DuplicateEntityError,
    EntityKind,
    EntityNotFoundError,
    EntityStore,
    StoreError,
    VersionConflictError,
)
from schoolhub.infrastructure.store.memory import InMemoryEntityStore
from schoolhub.infrastructure.store.sql import SQLAlchemyEntityStore

__all__ = [
    "EntityKind",
    "EntityStore",
    "StoreError",
    "EntityNotFoundError",
    "VersionConflictError",
    "DuplicateEntityError",
    "InMemoryEntityStore",
    "SQLAlchemyEntityStore",
]
