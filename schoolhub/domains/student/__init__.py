# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain.

Exports:
    StudentService: Student CRUD scoped to the caller's school.
    TransferCoordinator: Moves a student between schools.
"""

from schoolhub.domains.student.service import StudentService
from schoolhub.domains.student.transfer import TransferCoordinator

__all__ = ["StudentService", "TransferCoordinator"]
