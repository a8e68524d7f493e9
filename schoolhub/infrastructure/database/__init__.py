# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Relational persistence for the SQL entity store backend.

Exports:
    init_database / close_database: Engine lifecycle.
    session_scope: Transactional session context manager.
    Base and the ORM models: Table definitions.
"""

from schoolhub.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    create_tables,
    get_engine,
    get_sessionmaker,
    init_database,
    session_scope,
)
from schoolhub.infrastructure.database.models import (
    Base,
    ClassroomModel,
    IdentityModel,
    SchoolModel,
    StudentModel,
)

__all__ = [
    "DatabaseError",
    "init_database",
    "close_database",
    "create_tables",
    "get_engine",
    "get_sessionmaker",
    "session_scope",
    "check_database_connection",
    "Base",
    "SchoolModel",
    "ClassroomModel",
    "StudentModel",
    "IdentityModel",
]
