# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain.

Exports:
    Role: Closed role enumeration.
    JWTManager: Token codec.
    PasswordHasher: bcrypt wrapper.
    AuthGate, CurrentUser: Session token verification.
    AuthService: Credential issuer.
"""

from schoolhub.domains.auth.gate import AuthGate, CurrentUser
from schoolhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
    TokenPayload,
)
from schoolhub.domains.auth.password import PasswordHasher
from schoolhub.domains.auth.revocation import (
    InMemoryRevocationList,
    RedisRevocationList,
    RevocationList,
)
from schoolhub.domains.auth.roles import ADMIN_ROLES, ALL_ROLES, Role, parse_role
from schoolhub.domains.auth.service import AuthService

__all__ = [
    "ADMIN_ROLES",
    "ALL_ROLES",
    "AuthGate",
    "AuthService",
    "CurrentUser",
    "InMemoryRevocationList",
    "InvalidTokenError",
    "JWTError",
    "JWTManager",
    "PasswordHasher",
    "RedisRevocationList",
    "RevocationList",
    "Role",
    "TokenExpiredError",
    "TokenPair",
    "TokenPayload",
    "parse_role",
]
