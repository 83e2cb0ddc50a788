"""Persisted article translations, one row per (article, language)."""
from datetime import datetime
from pitchside import db


class ArticleTranslation(db.Model):
    """Translated fields of an article in a non-original language."""
    __tablename__ = 'article_translations'

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(
        db.String(36),
        db.ForeignKey('articles.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    language = db.Column(db.String(5), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255), nullable=True)
    summary = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False)
    keywords = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('article_id', 'language', name='unique_article_language'),
    )

    def fields(self):
        return {
            'title': self.title,
            'subtitle': self.subtitle,
            'summary': self.summary,
            'content': self.content,
            'keywords': list(self.keywords or []),
        }

    def to_dict(self):
        data = self.fields()
        data.update({
            'article_id': self.article_id,
            'language': self.language,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        })
        return data

    def __repr__(self):
        return f'<ArticleTranslation {self.article_id}:{self.language}>'
