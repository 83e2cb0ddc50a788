"""Translate an article into every other supported language.

Target languages are processed one at a time, in catalog order, with a
short pause between them so the upstream API doesn't rate-limit us. A
failure in one language is recorded and the batch moves on; translations
already saved in the same batch are kept (there is no cross-language
rollback).

Retranslating reruns the whole batch. Languages that failed are not
retried on their own.
"""
import logging
import time
from dataclasses import dataclass, field

from pitchside.constants.languages import target_languages

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 'success'
STATUS_FAILED = 'failed'


@dataclass
class BatchResult:
    results: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def succeeded(self) -> list[str]:
        return [lang for lang, status in self.results.items() if status == STATUS_SUCCESS]

    @property
    def failed(self) -> list[str]:
        return [lang for lang, status in self.results.items() if status == STATUS_FAILED]

    def to_dict(self):
        data = {'success': self.success, 'results': dict(self.results)}
        if self.errors:
            data['errors'] = list(self.errors)
        return data


class TranslationOrchestrator:
    """Runs a translation batch for one article.

    Args:
        client: object with translate(source, from_lang, to_lang)
        store: object with upsert(article_id, language, fields)
        delay: seconds to wait between languages
        sleep: sleep function (injectable for tests)
    """

    def __init__(self, client, store, delay=1.0, sleep=time.sleep):
        self.client = client
        self.store = store
        self.delay = delay
        self.sleep = sleep

    def translate_all_languages(self, article_id, title, subtitle, summary, content,
                                keywords, original_language) -> BatchResult:
        source = {
            'title': title,
            'subtitle': subtitle,
            'summary': summary,
            'content': content,
            'keywords': list(keywords or []),
        }
        targets = target_languages(original_language)
        batch = BatchResult()

        logger.info(f"Starting translation of article {article_id} from {original_language} to {targets}")

        for index, language in enumerate(targets):
            if index and self.delay:
                self.sleep(self.delay)
            self._translate_one(batch, article_id, source, original_language, language)

        if batch.success:
            logger.info(f"Article {article_id} translated to all {len(targets)} languages")
        else:
            logger.warning(
                f"Article {article_id} translated partially: "
                f"ok={batch.succeeded} failed={batch.failed}"
            )
        return batch

    def translate_article(self, article) -> BatchResult:
        """Run the batch from an Article's current fields."""
        fields = article.translatable_fields()
        return self.translate_all_languages(
            article.id,
            fields['title'],
            fields['subtitle'],
            fields['summary'],
            fields['content'],
            fields['keywords'],
            article.original_language,
        )

    def _translate_one(self, batch, article_id, source, original_language, language):
        logger.info(f"Translating article {article_id} to {language}...")
        try:
            translated = self.client.translate(source, original_language, language)
        except Exception as e:
            logger.error(f"Error translating article {article_id} to {language}: {e}")
            batch.results[language] = STATUS_FAILED
            batch.errors.append(f'Failed to translate to {language}: {e}')
            return

        if translated.skipped:
            # Nothing was translated; storing the original would hide the gap
            batch.results[language] = STATUS_FAILED
            batch.errors.append(f'Translation to {language} skipped: upstream out of capacity')
            return

        if translated.unparseable:
            logger.error(f"Model output for article {article_id} in {language} could not be parsed")
            batch.results[language] = STATUS_FAILED
            batch.errors.append(f'Failed to translate to {language}: unparseable model output')
            return

        try:
            self.store.upsert(article_id, language, translated.fields())
        except Exception as e:
            logger.error(f"Error saving {language} translation of article {article_id}: {e}")
            batch.results[language] = STATUS_FAILED
            batch.errors.append(f'Failed to save {language} translation: {e}')
            return

        logger.info(f"Successfully translated and saved {language}")
        batch.results[language] = STATUS_SUCCESS


def get_orchestrator():
    """Orchestrator wired to the current app's translation client and store."""
    from flask import current_app
    from pitchside.services.translation import get_translation_client
    from pitchside.services.translation_store import TranslationStore

    return TranslationOrchestrator(
        get_translation_client(),
        TranslationStore(),
        delay=current_app.config.get('TRANSLATION_BATCH_DELAY', 1.0),
    )
