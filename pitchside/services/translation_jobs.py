"""Background translation jobs.

Saving an article and translating it are two separate steps: the save
commits, then hands the article id to this queue and returns. The
translation outcome never affects the save.

Jobs run on a single worker thread, so batches from different saves run
one after another and the upstream rate limit is respected across
articles too. There is no cancellation: once started, a batch runs to
completion.

Set TRANSLATION_JOBS_EAGER to run jobs inline (used by the test config).
"""
import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from uuid import uuid4

from pitchside.services.redis_client import (
    TRANSLATION_JOB_PREFIX,
    TRANSLATION_JOB_TTL,
    cache_get_json,
    cache_set_json,
)

logger = logging.getLogger(__name__)

JOB_QUEUED = 'queued'
JOB_RUNNING = 'running'
JOB_COMPLETED = 'completed'
JOB_PARTIAL = 'partial'
JOB_FAILED = 'failed'

DEFAULT_MAX_JOBS = 1000


class TranslationJobQueue:
    """Hands article translation batches to a background worker."""

    def __init__(self, app, max_workers=1, max_jobs=DEFAULT_MAX_JOBS):
        self.app = app
        self.max_workers = max_workers
        self.max_jobs = max_jobs
        self._executor = None
        # Local copy for when Redis is off; oldest jobs are dropped past max_jobs
        self._jobs = OrderedDict()
        self._lock = threading.Lock()

    def _get_executor(self):
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix='translation-job'
            )
        return self._executor

    def submit(self, article_id, reason='save') -> str:
        """Queue a translation batch for an article. Returns the job id."""
        job_id = uuid4().hex
        self._save(job_id, {
            'job_id': job_id,
            'article_id': article_id,
            'reason': reason,
            'status': JOB_QUEUED,
            'created_at': datetime.utcnow().isoformat(),
        })
        logger.info(f"Queued translation job {job_id} for article {article_id} ({reason})")

        if self.app.config.get('TRANSLATION_JOBS_EAGER'):
            self._run(job_id, article_id)
        else:
            self._get_executor().submit(self._run, job_id, article_id)
        return job_id

    def get(self, job_id):
        """Job status dict, or None if unknown (or expired)."""
        with self.app.app_context():
            job = cache_get_json(f"{TRANSLATION_JOB_PREFIX}{job_id}")
        if job:
            return job
        with self._lock:
            return self._jobs.get(job_id)

    def shutdown(self, wait=True):
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __len__(self):
        with self._lock:
            return len(self._jobs)

    def _save(self, job_id, job):
        with self._lock:
            self._jobs[job_id] = job
            self._jobs.move_to_end(job_id)
            while len(self._jobs) > self.max_jobs:
                self._jobs.popitem(last=False)
        with self.app.app_context():
            cache_set_json(f"{TRANSLATION_JOB_PREFIX}{job_id}", job, TRANSLATION_JOB_TTL)

    def _update(self, job_id, **changes):
        with self._lock:
            job = dict(self._jobs.get(job_id, {}))
        job.update(changes)
        self._save(job_id, job)

    def _run(self, job_id, article_id):
        from pitchside import db
        from pitchside.models import Article
        from pitchside.services.translation_batch import get_orchestrator

        with self.app.app_context():
            self._update(job_id, status=JOB_RUNNING, started_at=datetime.utcnow().isoformat())
            try:
                article = db.session.get(Article, article_id)
                if article is None:
                    logger.warning(f"Translation job {job_id}: article {article_id} no longer exists")
                    self._update(
                        job_id,
                        status=JOB_FAILED,
                        errors=['Article not found'],
                        finished_at=datetime.utcnow().isoformat()
                    )
                    return

                batch = get_orchestrator().translate_article(article)

                if batch.success:
                    status = JOB_COMPLETED
                elif batch.succeeded:
                    status = JOB_PARTIAL
                else:
                    status = JOB_FAILED

                self._update(
                    job_id,
                    status=status,
                    results=batch.results,
                    errors=batch.errors,
                    finished_at=datetime.utcnow().isoformat()
                )
            except Exception as e:
                logger.exception(f"Translation job {job_id} crashed: {e}")
                self._update(
                    job_id,
                    status=JOB_FAILED,
                    errors=[str(e)],
                    finished_at=datetime.utcnow().isoformat()
                )


def get_job_queue():
    from flask import current_app
    return current_app.extensions['translation_jobs']
