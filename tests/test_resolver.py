"""
Tests for the read path: which content a reader sees in a given language.
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from pitchside.services.resolver import (
    SOURCE_FALLBACK,
    SOURCE_ORIGINAL,
    SOURCE_SESSION_CACHE,
    SOURCE_STORE,
    TranslationResolver,
    merge_translation,
)
from pitchside.services.session_cache import SessionCacheRegistry, SessionTranslationCache
from pitchside.services.translation_store import TranslationStore


def _translate(article, language):
    TranslationStore().upsert(article.id, language, {
        'title': f'[{language}] {article.title}',
        'subtitle': f'[{language}] {article.subtitle}',
        'summary': '',
        'content': f'[{language}] {article.content}',
        'keywords': [f'[{language}] k'],
    })


class TestOriginalLanguage:
    """Requests for the original language never look anything up"""

    def test_short_circuit(self, db_session, test_article):
        store = MagicMock()
        cache = MagicMock()
        resolver = TranslationResolver(store, cache)

        resolution = resolver.resolve(test_article, 'en')

        assert resolution.source == SOURCE_ORIGINAL
        assert resolution.content == test_article.translatable_fields()
        store.get.assert_not_called()
        cache.get.assert_not_called()

    @pytest.mark.parametrize('language', [None, '', 'de', 'klingon'])
    def test_unsupported_language_resolves_to_original(self, db_session, test_article, language):
        store = MagicMock()
        resolution = TranslationResolver(store, SessionTranslationCache()).resolve(test_article, language)

        assert resolution.language == 'en'
        assert resolution.source == SOURCE_ORIGINAL
        store.get.assert_not_called()


class TestFallback:
    """Missing translations fall back to the original, never an error"""

    @pytest.mark.parametrize('language', ['en', 'fr', 'es', 'ht'])
    def test_every_language_returns_content(self, db_session, test_article, language):
        resolver = TranslationResolver(TranslationStore(), SessionTranslationCache())

        resolution = resolver.resolve(test_article, language)

        assert resolution.content['title'] == 'Messi scores hat-trick'
        assert resolution.content['content']

    def test_missing_translation_is_pending(self, db_session, test_article):
        resolver = TranslationResolver(TranslationStore(), SessionTranslationCache())

        resolution = resolver.resolve(test_article, 'ht')

        assert resolution.source == SOURCE_FALLBACK
        assert resolution.language == 'en'
        assert resolution.translation_pending is True
        assert resolution.translated is False

    def test_store_error_falls_back(self, db_session, test_article):
        store = MagicMock()
        store.get.side_effect = RuntimeError('database is locked')
        resolver = TranslationResolver(store, SessionTranslationCache())

        resolution = resolver.resolve(test_article, 'fr')

        assert resolution.source == SOURCE_FALLBACK
        assert resolution.content['title'] == 'Messi scores hat-trick'
        assert resolver.translating is False


class TestTranslatedReads:
    """Tests for store hits and the session cache"""

    def test_store_hit_populates_session_cache(self, db_session, test_article):
        _translate(test_article, 'fr')
        cache = SessionTranslationCache()
        resolver = TranslationResolver(TranslationStore(), cache)

        resolution = resolver.resolve(test_article, 'fr')

        assert resolution.source == SOURCE_STORE
        assert resolution.language == 'fr'
        assert resolution.content['title'] == '[fr] Messi scores hat-trick'
        assert ('a1', 'fr') in cache

    def test_empty_translated_field_keeps_original(self, db_session, test_article):
        _translate(test_article, 'fr')
        resolver = TranslationResolver(TranslationStore(), SessionTranslationCache())

        resolution = resolver.resolve(test_article, 'fr')

        assert resolution.content['summary'] == 'Inter Miami win 4-0.'

    def test_session_cache_hit_skips_store(self, db_session, test_article):
        cache = SessionTranslationCache()
        cache.set('a1', 'es', {'title': 'Messi marca un triplete'})
        store = MagicMock()

        resolution = TranslationResolver(store, cache).resolve(test_article, 'es')

        assert resolution.source == SOURCE_SESSION_CACHE
        assert resolution.content == {'title': 'Messi marca un triplete'}
        store.get.assert_not_called()

    def test_translating_flag_set_during_lookup(self, db_session, test_article):
        seen = []
        store = MagicMock()
        resolver = TranslationResolver(store, SessionTranslationCache())
        store.get.side_effect = lambda *args: seen.append(resolver.translating)

        resolver.resolve(test_article, 'fr')

        assert seen == [True]
        assert resolver.translating is False


class TestMerge:
    def test_merge_keeps_article_values_for_empty_fields(self):
        merged = merge_translation(
            {'title': 'Title', 'summary': 'Summary', 'keywords': ['a']},
            {'title': 'Titre', 'summary': None, 'keywords': []},
        )

        assert merged == {'title': 'Titre', 'summary': 'Summary', 'keywords': ['a']}


class TestSessionCacheRegistry:
    """Tests for per-session cache ownership"""

    def test_sessions_are_isolated(self):
        registry = SessionCacheRegistry()
        registry.for_session('one').set('a1', 'fr', {'title': 'Titre'})

        assert registry.for_session('two').get('a1', 'fr') is None
        assert registry.for_session('one').get('a1', 'fr') == {'title': 'Titre'}

    def test_least_recently_used_session_is_evicted(self):
        registry = SessionCacheRegistry(max_sessions=2)
        registry.for_session('one').set('a1', 'fr', {'title': 'Titre'})
        registry.for_session('two')
        registry.for_session('one')
        registry.for_session('three')

        assert len(registry) == 2
        assert registry.for_session('one').get('a1', 'fr') == {'title': 'Titre'}
        assert len(registry.for_session('two')) == 0

    def test_end_session(self):
        registry = SessionCacheRegistry()
        registry.for_session('one').set('a1', 'fr', {'title': 'Titre'})

        registry.end_session('one')

        assert registry.for_session('one').get('a1', 'fr') is None

    def test_concurrent_sessions_share_the_registry(self):
        registry = SessionCacheRegistry(max_sessions=3)

        def browse(n):
            for i in range(200):
                registry.for_session(f'session-{(n + i) % 5}').set('a1', 'fr', {'title': 'Titre'})
                if i % 7 == 0:
                    registry.end_session(f'session-{i % 5}')
            return True

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(browse, range(8)))

        assert results == [True] * 8
        assert len(registry) <= 3
