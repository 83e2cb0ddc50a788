"""Database models for the Pitchside backend."""

from .article import Article, TRANSLATABLE_FIELDS
from .article_translation import ArticleTranslation
from .user_role import UserRole, ROLE_ADMIN, ROLE_EDITOR, VALID_ROLES

__all__ = [
    'Article',
    'TRANSLATABLE_FIELDS',
    'ArticleTranslation',
    'UserRole',
    'ROLE_ADMIN',
    'ROLE_EDITOR',
    'VALID_ROLES',
]
