"""LLM translation client for articles.

One chat-completions request translates every field of an article into a
single target language. The model is told to answer with a bare JSON
object; in practice it sometimes wraps it in markdown fences, drops a key
or returns the wrong type, so every field is validated on its own and falls
back to the source text when the model got it wrong.

Upstream failures come in two flavours:
- capacity (HTTP 429 rate limit, HTTP 402 quota/payment): the source is
  returned unchanged with ``skipped=True`` so read paths never block.
- everything else (other HTTP errors, timeouts, connection errors): raised
  as ``TranslationError`` for the caller to handle.
"""
import json
import logging
from dataclasses import dataclass, field

import requests
from flask import current_app

from pitchside.constants.languages import get_language_name

logger = logging.getLogger(__name__)

# Upstream statuses that mean "out of capacity" rather than "broken"
CAPACITY_STATUS_CODES = {402, 429}

SYSTEM_PROMPT = (
    'You are a professional translator specializing in sports journalism. '
    'Always respond with valid JSON only.'
)

RESPONSE_CONTRACT = """{
  "title": "translated title",
  "subtitle": "translated subtitle or null",
  "summary": "translated summary or null",
  "content": "translated content",
  "keywords": ["translated", "keywords", "array"]
}"""


class TranslationError(Exception):
    """Upstream translation call failed for a non-capacity reason."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class TranslationResult:
    """Translated article fields plus how much of the translation applied."""
    title: str
    subtitle: str | None
    summary: str | None
    content: str
    keywords: list[str] = field(default_factory=list)
    skipped: bool = False
    # Model output could not be read at all; nothing here is translated
    unparseable: bool = False
    fallback_fields: list[str] = field(default_factory=list)

    @classmethod
    def untranslated(cls, source: dict, skipped: bool = False,
                     unparseable: bool = False) -> 'TranslationResult':
        """A result carrying the source text as-is."""
        fields = source_fields(source)
        return cls(
            skipped=skipped,
            unparseable=unparseable,
            fallback_fields=[] if skipped else list(fields),
            **fields
        )

    def fields(self) -> dict:
        return {
            'title': self.title,
            'subtitle': self.subtitle,
            'summary': self.summary,
            'content': self.content,
            'keywords': list(self.keywords),
        }


def source_fields(source: dict) -> dict:
    """Pick the translatable fields out of a request body or article dict."""
    return {
        'title': source.get('title') or '',
        'subtitle': source.get('subtitle') or None,
        'summary': source.get('summary') or None,
        'content': source.get('content') or '',
        'keywords': [k for k in (source.get('keywords') or []) if isinstance(k, str)],
    }


def build_prompt(source: dict, from_lang: str, to_lang: str) -> str:
    """Build the user prompt asking for every field at once."""
    fields = source_fields(source)
    lines = [
        f'You are a professional translator. Translate the following article content '
        f'from {get_language_name(from_lang)} to {get_language_name(to_lang)}.',
        'Maintain the original meaning, tone, and style. For sports/football terminology, '
        'use the appropriate terms in the target language.',
        '',
        'IMPORTANT: Return ONLY a valid JSON object with these exact keys '
        '(no markdown, no code blocks, just raw JSON):',
        RESPONSE_CONTRACT,
        '',
        'Article to translate:',
        f"Title: {fields['title']}",
    ]
    if fields['subtitle']:
        lines.append(f"Subtitle: {fields['subtitle']}")
    if fields['summary']:
        lines.append(f"Summary: {fields['summary']}")
    lines.append(f"Content: {fields['content']}")
    if fields['keywords']:
        lines.append(f"Keywords: {', '.join(fields['keywords'])}")
    return '\n'.join(lines)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = text.strip()
    if cleaned.startswith('```json'):
        cleaned = cleaned[len('```json'):]
    elif cleaned.startswith('```'):
        cleaned = cleaned[3:]
    if cleaned.endswith('```'):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _pick_text(value, original):
    if isinstance(value, str) and value.strip():
        return value.strip(), False
    return original, True


def _pick_keywords(value, original):
    if isinstance(value, list) and all(isinstance(k, str) for k in value):
        keywords = [k.strip() for k in value if k.strip()]
        if keywords or not original:
            return keywords, False
    return list(original), True


def parse_translation(raw: str, source: dict) -> TranslationResult:
    """Parse model output against the JSON contract.

    Never raises: an unparseable payload falls back entirely and is flagged
    ``unparseable``; otherwise each field that is missing, empty or
    mistyped falls back to the source.
    Optional fields absent from the source stay absent.
    """
    original = source_fields(source)

    try:
        payload = json.loads(strip_code_fences(raw or ''))
    except (TypeError, ValueError):
        logger.warning(f"Translation output is not valid JSON, keeping original: {str(raw)[:200]!r}")
        return TranslationResult.untranslated(source, unparseable=True)

    if not isinstance(payload, dict):
        logger.warning(f"Translation output is not a JSON object: {type(payload).__name__}")
        return TranslationResult.untranslated(source, unparseable=True)

    result = {}
    fallback_fields = []

    for name in ('title', 'content'):
        result[name], fell_back = _pick_text(payload.get(name), original[name])
        if fell_back:
            fallback_fields.append(name)

    for name in ('subtitle', 'summary'):
        if original[name] is None:
            result[name] = None
            continue
        result[name], fell_back = _pick_text(payload.get(name), original[name])
        if fell_back:
            fallback_fields.append(name)

    result['keywords'], fell_back = _pick_keywords(payload.get('keywords'), original['keywords'])
    if fell_back:
        fallback_fields.append('keywords')

    if fallback_fields:
        logger.warning(f"Translation output missing or invalid fields {fallback_fields}, kept original")

    return TranslationResult(fallback_fields=fallback_fields, **result)


class TranslationClient:
    """Calls an OpenAI-compatible chat-completions endpoint to translate articles.

    Usage:
        client = TranslationClient(api_url, api_key, model)
        result = client.translate(article.translatable_fields(), 'en', 'fr')
        if result.skipped:
            # upstream out of capacity; result holds the original text
            ...
    """

    def __init__(self, api_url, api_key, model, timeout=60, temperature=0.3,
                 referer=None, app_title='Pitchside Translation', session=None):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.referer = referer
        self.app_title = app_title
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        """Build a client from a Flask config mapping."""
        return cls(
            api_url=config['TRANSLATION_API_URL'],
            api_key=config.get('TRANSLATION_API_KEY', ''),
            model=config['TRANSLATION_MODEL'],
            timeout=config.get('TRANSLATION_TIMEOUT', 60),
            referer=config.get('SITE_URL'),
        )

    def _headers(self):
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
            'X-Title': self.app_title,
        }
        if self.referer:
            headers['HTTP-Referer'] = self.referer
        return headers

    def _complete(self, prompt: str):
        """Send one chat completion. Returns the model text, or None on capacity errors."""
        body = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': SYSTEM_PROMPT},
                {'role': 'user', 'content': prompt},
            ],
            'temperature': self.temperature,
        }

        try:
            response = self.session.post(
                self.api_url, json=body, headers=self._headers(), timeout=self.timeout
            )
        except requests.Timeout as e:
            raise TranslationError(f'Translation API timeout after {self.timeout}s') from e
        except requests.RequestException as e:
            raise TranslationError(f'Translation API request failed: {e}') from e

        if response.status_code in CAPACITY_STATUS_CODES:
            logger.warning(
                f"Translation API out of capacity ({response.status_code}), skipping translation"
            )
            return None

        if not response.ok:
            logger.error(f"Translation API error {response.status_code}: {response.text[:500]}")
            raise TranslationError(
                f'Translation API error: {response.status_code}',
                status_code=response.status_code
            )

        try:
            return response.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError):
            logger.warning("Translation API returned an unexpected response shape")
            return ''

    def translate(self, source: dict, from_lang: str, to_lang: str) -> TranslationResult:
        """Translate an article's fields from one language to another.

        Callers must short-circuit from_lang == to_lang before calling.

        Args:
            source: dict with title, subtitle, summary, content, keywords
            from_lang: Original language code
            to_lang: Target language code

        Returns:
            TranslationResult (skipped=True when upstream is out of capacity)

        Raises:
            TranslationError: on any non-capacity upstream failure
        """
        if not self.api_key:
            raise TranslationError('TRANSLATION_API_KEY is not configured')

        raw = self._complete(build_prompt(source, from_lang, to_lang))
        if raw is None:
            return TranslationResult.untranslated(source, skipped=True)

        return parse_translation(raw, source)


def get_translation_client():
    """Translation client for the current app (built lazily from config)."""
    client = current_app.extensions.get('translation_client')
    if client is None:
        client = TranslationClient.from_config(current_app.config)
        current_app.extensions['translation_client'] = client
    return client
