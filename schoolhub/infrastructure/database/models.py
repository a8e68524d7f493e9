# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models, one table per entity kind.

Every table carries a ``version`` column used for compare-and-swap
updates by the SQL entity store.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base with the columns shared by every document table."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )

    def to_document(self) -> dict[str, Any]:
        """Return the row as a plain document dictionary."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}


class SchoolModel(Base):
    """School root aggregate."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)


class ClassroomModel(Base):
    """Classroom, scoped to one school."""

    __tablename__ = "classrooms"

    school_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    grade: Mapped[str | None] = mapped_column(String(50), nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)


class StudentModel(Base):
    """Student, owned by exactly one school."""

    __tablename__ = "students"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    school_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    classroom_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("classrooms.id", ondelete="SET NULL"), nullable=True
    )


class IdentityModel(Base):
    """Login identity with its role."""

    __tablename__ = "identities"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    school_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("schools.id", ondelete="RESTRICT"), nullable=True
    )
