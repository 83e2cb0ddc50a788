"""Article routes: editorial CRUD, translated reads and crawler meta pages."""

from datetime import datetime
import logging

from flask import Blueprint, request, jsonify, current_app, redirect, make_response
from pitchside import db
from pitchside.constants import (
    SUPPORTED_LANGUAGES,
    normalize_category,
    validate_category,
    is_supported,
)
from pitchside.models import Article, TRANSLATABLE_FIELDS
from pitchside.services.article_meta import is_crawler, render_article_meta
from pitchside.services.redis_client import (
    ARTICLE_META_PREFIX,
    ARTICLE_META_TTL,
    cache_delete,
    cache_get,
    cache_set,
)
from pitchside.services.resolver import TranslationResolver
from pitchside.services.session_cache import get_session_cache
from pitchside.services.translation_batch import get_orchestrator
from pitchside.services.translation_jobs import get_job_queue
from pitchside.services.translation_store import TranslationStore
from pitchside.utils.auth import editor_required, admin_required

logger = logging.getLogger(__name__)

articles_bp = Blueprint('articles', __name__)

# Fields editors may set directly
EDITABLE_FIELDS = (
    'title', 'subtitle', 'summary', 'content', 'category', 'keywords',
    'thumbnail_url', 'author', 'is_editorial',
)


def _parse_datetime(value):
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00')).replace(tzinfo=None)


def _validate_payload(data, partial=False):
    """Return an error message for an invalid article payload, or None."""
    if not partial:
        missing = [k for k in ('title', 'content', 'category') if not data.get(k)]
        if missing:
            return f"Missing required fields: {', '.join(missing)}"
    else:
        emptied = [k for k in ('title', 'content', 'category') if k in data and not data[k]]
        if emptied:
            return f"Fields cannot be empty: {', '.join(emptied)}"

    if 'category' in data and not validate_category(data['category']):
        return f"Invalid category: {data['category']}"

    if 'keywords' in data and data['keywords'] is not None:
        keywords = data['keywords']
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            return 'keywords must be a list of strings'

    if not partial and 'original_language' in data and not is_supported(data['original_language']):
        return f"Unsupported language: {data['original_language']}"

    return None


def _resolved_dict(article, resolver, language):
    data = article.to_dict()
    resolution = resolver.resolve(article, language)
    data.update(resolution.content)
    data['language'] = resolution.language
    data['translated'] = resolution.translated
    data['translation_pending'] = resolution.translation_pending
    return data


def _resolver():
    return TranslationResolver(TranslationStore(), get_session_cache())


@articles_bp.route('', methods=['GET'])
def get_articles():
    """List published articles, newest first, resolved for ?lang=."""
    try:
        page = request.args.get('page', 1, type=int)
        per_page = min(request.args.get('per_page', 20, type=int), 100)
        category = request.args.get('category')
        author = request.args.get('author')
        editorial = request.args.get('editorial', '').lower() == 'true'
        language = request.args.get('lang')

        query = Article.query.filter_by(is_published=True)

        if category:
            query = query.filter_by(category=normalize_category(category))
        if author:
            query = query.filter_by(author=author)
        if editorial:
            query = query.filter_by(is_editorial=True)

        articles = query.order_by(Article.published_at.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )
        resolver = _resolver()

        return jsonify({
            'articles': [_resolved_dict(a, resolver, language) for a in articles.items],
            'total': articles.total,
            'pages': articles.pages,
            'current_page': page
        }), 200
    except Exception as e:
        logger.error(f"Error listing articles: {e}")
        return jsonify({'error': str(e)}), 500


@articles_bp.route('/<article_id>', methods=['GET'])
def get_article(article_id):
    """Get a published article in ?lang= (falls back to the original)."""
    try:
        article = db.session.get(Article, article_id)
        if not article or not article.is_published:
            return jsonify({'error': 'Article not found'}), 404

        article.view_count += 1
        db.session.commit()

        return jsonify(_resolved_dict(article, _resolver(), request.args.get('lang'))), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error fetching article {article_id}: {e}")
        return jsonify({'error': str(e)}), 500


@articles_bp.route('', methods=['POST'])
@editor_required
def create_article(current_user_id):
    """Create an article. Published articles are queued for translation."""
    try:
        data = request.get_json() or {}

        error = _validate_payload(data)
        if error:
            return jsonify({'error': error}), 400

        article = Article(
            title=data['title'],
            subtitle=data.get('subtitle'),
            summary=data.get('summary'),
            content=data['content'],
            category=normalize_category(data['category']),
            keywords=data.get('keywords') or [],
            thumbnail_url=data.get('thumbnail_url'),
            author=data.get('author'),
            original_language=data.get('original_language', 'en'),
            is_editorial=bool(data.get('is_editorial', False)),
            is_published=bool(data.get('is_published', False)),
            published_at=_parse_datetime(data.get('published_at')),
            created_by=current_user_id,
        )
        if article.is_published and not article.published_at:
            article.published_at = datetime.utcnow()

        db.session.add(article)
        db.session.commit()

        response = {
            'message': 'Article created successfully',
            'article': article.to_dict()
        }
        if article.is_published:
            response['translation_job_id'] = get_job_queue().submit(article.id, reason='publish')

        return jsonify(response), 201
    except ValueError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating article: {e}")
        return jsonify({'error': str(e)}), 500


@articles_bp.route('/<article_id>', methods=['PUT'])
@editor_required
def update_article(current_user_id, article_id):
    """Update an article.

    Existing translations are left as they are (they may go stale). A
    translation job is queued only when the article becomes published.
    """
    try:
        article = db.session.get(Article, article_id)
        if not article:
            return jsonify({'error': 'Article not found'}), 404

        data = request.get_json() or {}

        if 'original_language' in data and data['original_language'] != article.original_language:
            return jsonify({'error': 'original_language cannot be changed after creation'}), 400

        error = _validate_payload(data, partial=True)
        if error:
            return jsonify({'error': error}), 400

        content_changed = False
        for key in EDITABLE_FIELDS:
            if key not in data:
                continue
            value = data[key]
            if key == 'category':
                value = normalize_category(value)
            elif key == 'keywords':
                value = value or []
            if key in TRANSLATABLE_FIELDS and value != getattr(article, key):
                content_changed = True
            setattr(article, key, value)

        if content_changed:
            article.content_updated_at = datetime.utcnow()

        if 'published_at' in data:
            article.published_at = _parse_datetime(data['published_at'])

        became_published = False
        if 'is_published' in data:
            publish = bool(data['is_published'])
            became_published = publish and not article.is_published
            article.is_published = publish
            if became_published and not article.published_at:
                article.published_at = datetime.utcnow()

        db.session.commit()
        cache_delete(f'{ARTICLE_META_PREFIX}{article_id}')

        response = {
            'message': 'Article updated successfully',
            'article': article.to_dict()
        }
        if became_published:
            response['translation_job_id'] = get_job_queue().submit(article.id, reason='publish')

        return jsonify(response), 200
    except ValueError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating article {article_id}: {e}")
        return jsonify({'error': str(e)}), 500


@articles_bp.route('/<article_id>', methods=['DELETE'])
@admin_required
def delete_article(current_user_id, article_id):
    """Delete an article together with its translations."""
    try:
        article = db.session.get(Article, article_id)
        if not article:
            return jsonify({'error': 'Article not found'}), 404

        db.session.delete(article)
        db.session.commit()
        cache_delete(f'{ARTICLE_META_PREFIX}{article_id}')

        return jsonify({'message': 'Article deleted successfully'}), 200
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 500


@articles_bp.route('/<article_id>/retranslate', methods=['POST'])
@editor_required
def retranslate_article(current_user_id, article_id):
    """Rerun the full translation batch and report per-language results.

    Partial failures come back with 200 and success=false; the editor
    decides whether to retry.
    """
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({'error': 'Article not found'}), 404

    logger.info(f"User {current_user_id} requested retranslation of article {article_id}")
    batch = get_orchestrator().translate_article(article)
    return jsonify(batch.to_dict()), 200


@articles_bp.route('/<article_id>/translations', methods=['GET'])
@editor_required
def get_translation_status(current_user_id, article_id):
    """Per-language translation status, including staleness."""
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({'error': 'Article not found'}), 404

    rows = {row.language: row for row in TranslationStore().list_for_article(article_id)}
    languages = {}
    for language in SUPPORTED_LANGUAGES:
        if language == article.original_language:
            languages[language] = {'status': 'original'}
            continue
        row = rows.get(language)
        if row is None:
            languages[language] = {'status': 'missing'}
            continue
        languages[language] = {
            'status': 'translated',
            'updated_at': row.updated_at.isoformat(),
            'stale': row.updated_at < article.content_updated_at,
        }

    return jsonify({
        'article_id': article_id,
        'original_language': article.original_language,
        'languages': languages,
    }), 200


@articles_bp.route('/<article_id>/meta', methods=['GET'])
def get_article_meta(article_id):
    """Static meta page for social crawlers; everyone else goes to the SPA."""
    site_url = current_app.config['SITE_URL']

    if not is_crawler(request.headers.get('User-Agent')):
        return redirect(f'{site_url}/articles/{article_id}', code=302)

    cache_key = f'{ARTICLE_META_PREFIX}{article_id}'
    html = cache_get(cache_key)

    if html is None:
        article = Article.query.filter_by(id=article_id, is_published=True).first()
        if not article:
            return jsonify({'error': 'Article not found'}), 404

        html = render_article_meta(article, site_url, current_app.config['SITE_NAME'])
        cache_set(cache_key, html, ARTICLE_META_TTL)

    response = make_response(html, 200)
    response.headers['Content-Type'] = 'text/html; charset=utf-8'
    response.headers['Cache-Control'] = f'public, max-age={ARTICLE_META_TTL}'
    return response
