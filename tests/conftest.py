"""
Pytest configuration and fixtures for testing the Pitchside API.
"""

import os
import sys
from datetime import datetime, timedelta

import jwt
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pitchside import create_app, db
from pitchside.models import Article, UserRole, ROLE_ADMIN, ROLE_EDITOR
from pitchside.services.translation import TranslationError, TranslationResult, source_fields

fake = Faker()

TEST_JWT_SECRET = 'test-secret-key-for-testing'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'
    os.environ['JWT_SECRET_KEY'] = TEST_JWT_SECRET

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    app.extensions['translation_jobs'].shutdown()
    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


class FakeTranslationClient:
    """Stands in for the LLM client.

    Translates by prefixing every field with "[lang] ", records the order
    of calls, and can be told to raise or report a capacity skip for
    specific target languages.
    """

    def __init__(self, fail_languages=(), skip_languages=()):
        self.calls = []
        self.fail_languages = set(fail_languages)
        self.skip_languages = set(skip_languages)
        self.in_flight = 0
        self.max_in_flight = 0

    def translate(self, source, from_lang, to_lang):
        self.calls.append((from_lang, to_lang))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if to_lang in self.fail_languages:
                raise TranslationError(f'upstream rejected {to_lang}', status_code=500)
            if to_lang in self.skip_languages:
                return TranslationResult.untranslated(source, skipped=True)

            fields = source_fields(source)
            return TranslationResult(
                title=f"[{to_lang}] {fields['title']}",
                subtitle=f"[{to_lang}] {fields['subtitle']}" if fields['subtitle'] else None,
                summary=f"[{to_lang}] {fields['summary']}" if fields['summary'] else None,
                content=f"[{to_lang}] {fields['content']}",
                keywords=[f'[{to_lang}] {k}' for k in fields['keywords']],
            )
        finally:
            self.in_flight -= 1

    @property
    def target_languages(self):
        return [to_lang for _, to_lang in self.calls]


@pytest.fixture
def fake_translator(app):
    """Install a FakeTranslationClient as the app's translation client."""
    translator = FakeTranslationClient()
    app.extensions['translation_client'] = translator
    yield translator
    app.extensions.pop('translation_client', None)


def make_token(user_id, secret=TEST_JWT_SECRET, expires_in=3600, audience='authenticated'):
    """Mint an access token the way the hosted auth provider does."""
    payload = {
        'sub': user_id,
        'aud': audience,
        'exp': datetime.utcnow() + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm='HS256')


def _headers_for(user_id):
    return {'Authorization': f'Bearer {make_token(user_id)}'}


def _grant(user_id, role):
    db.session.add(UserRole(user_id=user_id, role=role))
    db.session.commit()


@pytest.fixture
def reader_id():
    return fake.uuid4()


@pytest.fixture
def reader_headers(db_session, reader_id):
    """Signed-in user without any role."""
    return _headers_for(reader_id)


@pytest.fixture
def editor_id(db_session):
    user_id = fake.uuid4()
    _grant(user_id, ROLE_EDITOR)
    return user_id


@pytest.fixture
def editor_headers(editor_id):
    return _headers_for(editor_id)


@pytest.fixture
def admin_id(db_session):
    user_id = fake.uuid4()
    _grant(user_id, ROLE_ADMIN)
    return user_id


@pytest.fixture
def admin_headers(admin_id):
    return _headers_for(admin_id)


def _create_article(**overrides):
    """Helper to create an article with sensible defaults."""
    data = {
        'title': fake.sentence(nb_words=5),
        'subtitle': fake.sentence(nb_words=8),
        'summary': fake.paragraph(nb_sentences=2),
        'content': fake.paragraph(nb_sentences=6),
        'category': 'Match Analysis',
        'keywords': ['football', 'analysis'],
        'author': fake.name(),
        'original_language': 'en',
        'is_published': True,
        'published_at': datetime.utcnow(),
    }
    data.update(overrides)
    article = Article(**data)
    db.session.add(article)
    db.session.commit()
    return article


@pytest.fixture
def make_article(db_session):
    """Factory fixture: make_article(title=..., original_language=...)."""
    return _create_article


@pytest.fixture
def test_article(make_article):
    """The published English article used across scenarios."""
    return make_article(
        id='a1',
        title='Messi scores hat-trick',
        subtitle='A night to remember in Miami',
        summary='Inter Miami win 4-0.',
        content='Lionel Messi scored three goals as Inter Miami cruised to victory.',
        keywords=['messi', 'hat-trick'],
    )
