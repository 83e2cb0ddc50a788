"""Language catalog: single source of truth for supported article languages.

Must stay in sync with the frontend LanguageContext (en, fr, es, ht).
Order matters: batch translation walks target languages in this order.
"""

SUPPORTED_LANGUAGES = ('en', 'fr', 'es', 'ht')

LANGUAGE_NAMES = {
    'en': 'English',
    'fr': 'French',
    'es': 'Spanish',
    'ht': 'Haitian Creole',
}

DEFAULT_LANGUAGE = 'en'


def is_supported(lang) -> bool:
    """Check whether a language code is one we publish in."""
    return lang in SUPPORTED_LANGUAGES


def normalize_language(lang, default=None):
    """Lowercase and trim a language code (e.g. 'FR-ca' -> 'fr').

    Returns default if the code is empty or not supported.
    """
    if not lang or not isinstance(lang, str):
        return default
    code = lang.strip().lower()[:2]
    return code if code in SUPPORTED_LANGUAGES else default


def get_language_name(lang: str) -> str:
    """Human readable language name, falling back to the code itself."""
    return LANGUAGE_NAMES.get(lang, lang)


def target_languages(original_language: str) -> list[str]:
    """All supported languages except the original, in catalog order."""
    return [lang for lang in SUPPORTED_LANGUAGES if lang != original_language]
