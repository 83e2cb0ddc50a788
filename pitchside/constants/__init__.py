"""Shared constants for the application."""

from pitchside.constants.categories import (
    VALID_CATEGORIES,
    LEGACY_CATEGORY_MAP,
    normalize_category,
    validate_category,
)
from pitchside.constants.languages import (
    SUPPORTED_LANGUAGES,
    LANGUAGE_NAMES,
    DEFAULT_LANGUAGE,
    is_supported,
    normalize_language,
    get_language_name,
    target_languages,
)

__all__ = [
    'VALID_CATEGORIES',
    'LEGACY_CATEGORY_MAP',
    'normalize_category',
    'validate_category',
    'SUPPORTED_LANGUAGES',
    'LANGUAGE_NAMES',
    'DEFAULT_LANGUAGE',
    'is_supported',
    'normalize_language',
    'get_language_name',
    'target_languages',
]
