# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services for SchoolHub.

Subpackages:
    auth: Roles, tokens, credential issuing and the authentication gate.
    school: School management.
    classroom: Classroom management.
    student: Student management and the transfer coordinator.
"""
