"""Per-session cache of resolved article translations.

Each browsing session owns one SessionTranslationCache, keyed by
(article_id, language). Entries are written on the first successful store
lookup and never invalidated; the whole cache goes away when its session
is evicted from the registry. Nothing is shared between sessions.
"""
import threading
from collections import OrderedDict
from uuid import uuid4

from flask import current_app, session

SESSION_KEY = 'translation_session_id'
DEFAULT_MAX_SESSIONS = 1000


class SessionTranslationCache:
    """Cache of display content for one session."""

    def __init__(self):
        self._entries = {}

    def get(self, article_id, language):
        return self._entries.get((article_id, language))

    def set(self, article_id, language, content: dict):
        self._entries[(article_id, language)] = dict(content)

    def __contains__(self, key):
        return key in self._entries

    def __len__(self):
        return len(self._entries)

    def clear(self):
        self._entries.clear()


class SessionCacheRegistry:
    """Owns the per-session caches of one process, evicting least recently used sessions."""

    def __init__(self, max_sessions=DEFAULT_MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._caches = OrderedDict()
        # Shared by every request thread of the process
        self._lock = threading.Lock()

    def for_session(self, session_id) -> SessionTranslationCache:
        with self._lock:
            cache = self._caches.get(session_id)
            if cache is None:
                cache = SessionTranslationCache()
                self._caches[session_id] = cache
                while len(self._caches) > self.max_sessions:
                    self._caches.popitem(last=False)
            else:
                self._caches.move_to_end(session_id)
            return cache

    def end_session(self, session_id):
        with self._lock:
            self._caches.pop(session_id, None)

    def __len__(self):
        with self._lock:
            return len(self._caches)


def get_session_cache() -> SessionTranslationCache:
    """Cache for the browsing session of the current request.

    The session id lives in Flask's signed session cookie and is created
    on first use.
    """
    registry = current_app.extensions.get('translation_session_caches')
    if registry is None:
        registry = SessionCacheRegistry()
        current_app.extensions['translation_session_caches'] = registry

    session_id = session.get(SESSION_KEY)
    if not session_id:
        session_id = uuid4().hex
        session[SESSION_KEY] = session_id

    return registry.for_session(session_id)
