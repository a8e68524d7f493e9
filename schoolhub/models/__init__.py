# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for the HTTP API.

All models serialize to camelCase JSON and accept either camelCase or
snake_case on input.
"""
