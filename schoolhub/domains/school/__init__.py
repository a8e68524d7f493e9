# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School domain."""

from schoolhub.domains.school.service import SchoolService

__all__ = ["SchoolService"]
