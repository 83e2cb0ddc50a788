"""
Tests for the background translation job queue.
"""

from pitchside.services.translation_jobs import (
    JOB_COMPLETED,
    JOB_FAILED,
    JOB_PARTIAL,
    TranslationJobQueue,
)
from pitchside.services.translation_store import TranslationStore


class TestEagerJobs:
    """Jobs run inline under the testing config"""

    def test_completed_job(self, app, fake_translator, test_article):
        queue = app.extensions['translation_jobs']

        job_id = queue.submit('a1')
        job = queue.get(job_id)

        assert job['status'] == JOB_COMPLETED
        assert job['article_id'] == 'a1'
        assert job['reason'] == 'save'
        assert job['finished_at']
        assert len(TranslationStore().list_for_article('a1')) == 3

    def test_partial_job(self, app, fake_translator, test_article):
        fake_translator.fail_languages = {'fr'}
        queue = app.extensions['translation_jobs']

        job = queue.get(queue.submit('a1'))

        assert job['status'] == JOB_PARTIAL
        assert job['errors'][0].startswith('Failed to translate to fr')

    def test_all_languages_failing(self, app, fake_translator, test_article):
        fake_translator.fail_languages = {'fr', 'es', 'ht'}
        queue = app.extensions['translation_jobs']

        job = queue.get(queue.submit('a1'))

        assert job['status'] == JOB_FAILED
        assert len(job['errors']) == 3

    def test_missing_article(self, app, fake_translator, db_session):
        queue = app.extensions['translation_jobs']

        job = queue.get(queue.submit('gone'))

        assert job['status'] == JOB_FAILED
        assert job['errors'] == ['Article not found']
        assert fake_translator.calls == []

    def test_unknown_job(self, app):
        assert app.extensions['translation_jobs'].get('nope') is None

    def test_oldest_jobs_are_dropped_past_max_jobs(self, app, fake_translator, test_article):
        queue = TranslationJobQueue(app, max_jobs=2)

        first, second, third = (queue.submit('a1') for _ in range(3))

        assert len(queue) == 2
        assert queue.get(first) is None
        assert queue.get(second)['status'] == JOB_COMPLETED
        assert queue.get(third)['status'] == JOB_COMPLETED


class TestBackgroundJobs:
    """Jobs submitted to the worker thread"""

    def test_runs_on_worker_thread(self, app, fake_translator, test_article, monkeypatch):
        monkeypatch.setitem(app.config, 'TRANSLATION_JOBS_EAGER', False)
        queue = TranslationJobQueue(app)

        job_id = queue.submit('a1', reason='publish')
        queue.shutdown(wait=True)

        job = queue.get(job_id)
        assert job['status'] == JOB_COMPLETED
        assert job['reason'] == 'publish'
        assert fake_translator.target_languages == ['fr', 'es', 'ht']
        assert sorted(row.language for row in TranslationStore().list_for_article('a1')) == ['es', 'fr', 'ht']
