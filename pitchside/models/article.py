"""Article model for editorial content."""

from datetime import datetime
from uuid import uuid4
from pitchside import db


# Fields that get translated; everything else is language independent
TRANSLATABLE_FIELDS = ('title', 'subtitle', 'summary', 'content', 'keywords')


class Article(db.Model):
    """An article authored in one of the supported languages."""

    __tablename__ = 'articles'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid4()))
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255), nullable=True)
    summary = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    keywords = db.Column(db.JSON, nullable=True)  # Array of strings
    thumbnail_url = db.Column(db.String(500), nullable=True)
    author = db.Column(db.String(120), nullable=True, index=True)
    # Immutable after creation; translations are keyed against it
    original_language = db.Column(db.String(5), default='en', nullable=False)
    is_published = db.Column(db.Boolean, default=False, nullable=False, index=True)
    is_editorial = db.Column(db.Boolean, default=False, nullable=False)
    published_at = db.Column(db.DateTime, nullable=True, index=True)
    view_count = db.Column(db.Integer, default=0, nullable=False)
    created_by = db.Column(db.String(64), nullable=True)
    # Last edit of a translatable field; translations older than this are stale
    content_updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    translations = db.relationship(
        'ArticleTranslation',
        backref='article',
        lazy=True,
        cascade='all, delete-orphan',
    )

    def translatable_fields(self):
        """The fields a translation replaces, as a plain dict."""
        return {
            'title': self.title,
            'subtitle': self.subtitle,
            'summary': self.summary,
            'content': self.content,
            'keywords': list(self.keywords or []),
        }

    def to_dict(self):
        """Convert article to dictionary (original language fields)."""
        return {
            'id': self.id,
            'title': self.title,
            'subtitle': self.subtitle,
            'summary': self.summary,
            'content': self.content,
            'category': self.category,
            'keywords': list(self.keywords or []),
            'thumbnail_url': self.thumbnail_url,
            'author': self.author,
            'original_language': self.original_language,
            'is_published': self.is_published,
            'is_editorial': self.is_editorial,
            'published_at': self.published_at.isoformat() if self.published_at else None,
            'view_count': self.view_count,
            'content_updated_at': self.content_updated_at.isoformat() if self.content_updated_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Article {self.id}: {self.title}>'
