"""Persistence for article translations.

Rows are keyed by (article_id, language). Writes are upserts: a second
write for the same key overwrites the first, so there is never more than
one row per key. Nothing here expires: a translation stays until it is
overwritten or its article is deleted, even if the article was edited in
the meantime.
"""
import logging
from sqlalchemy.exc import IntegrityError

from pitchside import db
from pitchside.models import Article, ArticleTranslation

logger = logging.getLogger(__name__)

_FIELDS = ('title', 'subtitle', 'summary', 'content', 'keywords')


class TranslationStore:
    """Read and upsert persisted translations through the SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session or db.session

    def get(self, article_id, language):
        """Return the ArticleTranslation for a key, or None."""
        return self.session.query(ArticleTranslation).filter_by(
            article_id=article_id,
            language=language
        ).first()

    def list_for_article(self, article_id):
        return self.session.query(ArticleTranslation).filter_by(
            article_id=article_id
        ).order_by(ArticleTranslation.language).all()

    def upsert(self, article_id, language, fields: dict):
        """Insert or overwrite the translation for (article_id, language).

        Raises:
            ValueError: if language is the article's original language
            SQLAlchemyError: if the write fails (session is rolled back)
        """
        article = self.session.get(Article, article_id)
        if article is not None and article.original_language == language:
            raise ValueError(
                f'Refusing to store a {language} translation of an article written in {language}'
            )

        values = {name: fields.get(name) for name in _FIELDS}
        values['keywords'] = list(values['keywords'] or [])

        try:
            row = self._write(article_id, language, values)
            self.session.commit()
            return row
        except IntegrityError:
            # Another writer inserted the same key first: overwrite theirs
            self.session.rollback()
            logger.info(f"Translation {article_id}:{language} inserted concurrently, updating instead")
            try:
                row = self._write(article_id, language, values)
                self.session.commit()
                return row
            except Exception:
                self.session.rollback()
                raise
        except Exception:
            self.session.rollback()
            raise

    def _write(self, article_id, language, values):
        row = self.get(article_id, language)
        if row is None:
            row = ArticleTranslation(article_id=article_id, language=language)
            self.session.add(row)
        for name, value in values.items():
            setattr(row, name, value)
        self.session.flush()
        return row

    def delete_for_article(self, article_id) -> int:
        """Delete every translation of an article. Returns rows deleted."""
        try:
            deleted = self.session.query(ArticleTranslation).filter_by(
                article_id=article_id
            ).delete()
            self.session.commit()
            return deleted
        except Exception:
            self.session.rollback()
            raise
