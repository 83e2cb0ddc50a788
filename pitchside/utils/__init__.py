"""Shared utilities for the Pitchside backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from pitchside.utils.auth import (
    token_required,
    role_required,
    editor_required,
    admin_required,
)
from pitchside.utils.rate_limit import rate_limit

__all__ = [
    'token_required',
    'role_required',
    'editor_required',
    'admin_required',
    'rate_limit',
]
