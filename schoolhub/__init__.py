# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SchoolHub - multi-tenant school management API."""

__version__ = "1.0.0"
