"""Read path: pick the content to display for an article in a language.

Lookup order for a non-original language:
1. the session cache
2. the persisted translation (which then populates the session cache)
3. the article's own fields, flagged ``translation_pending``

A missing translation is never an error; readers just see the original.
"""
import logging
from dataclasses import dataclass

from pitchside.constants.languages import normalize_language

logger = logging.getLogger(__name__)

SOURCE_ORIGINAL = 'original'
SOURCE_SESSION_CACHE = 'session_cache'
SOURCE_STORE = 'store'
SOURCE_FALLBACK = 'fallback'


@dataclass
class Resolution:
    content: dict
    language: str
    source: str
    translation_pending: bool = False

    @property
    def translated(self) -> bool:
        return self.source in (SOURCE_SESSION_CACHE, SOURCE_STORE)


def merge_translation(article_fields: dict, translation_fields: dict) -> dict:
    """Overlay translated fields on the article's, keeping the article's where empty."""
    merged = dict(article_fields)
    for name, value in translation_fields.items():
        if value:
            merged[name] = value
    return merged


class TranslationResolver:
    """Resolves display content for one request.

    ``translating`` is True while a lookup is in flight; it only drives a
    loading indicator.
    """

    def __init__(self, store, session_cache):
        self.store = store
        self.session_cache = session_cache
        self.translating = False

    def resolve(self, article, language) -> Resolution:
        original_language = article.original_language or 'en'
        language = normalize_language(language, default=original_language)
        article_fields = article.translatable_fields()

        if language == original_language:
            return Resolution(article_fields, original_language, SOURCE_ORIGINAL)

        cached = self.session_cache.get(article.id, language)
        if cached is not None:
            return Resolution(dict(cached), language, SOURCE_SESSION_CACHE)

        self.translating = True
        try:
            translation = self.store.get(article.id, language)
        except Exception as e:
            logger.error(f"Translation lookup failed for {article.id}:{language}: {e}")
            translation = None
        finally:
            self.translating = False

        if translation is None:
            return Resolution(article_fields, original_language, SOURCE_FALLBACK, translation_pending=True)

        merged = merge_translation(article_fields, translation.fields())
        self.session_cache.set(article.id, language, merged)
        return Resolution(merged, language, SOURCE_STORE)
