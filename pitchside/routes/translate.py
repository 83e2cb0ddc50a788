"""Translation routes: single translation, batch translation, lookups and job status."""

import logging

from flask import Blueprint, request, jsonify
from pitchside import db
from pitchside.constants import normalize_language
from pitchside.models import Article
from pitchside.services.translation import TranslationError, get_translation_client, source_fields
from pitchside.services.translation_batch import get_orchestrator
from pitchside.services.translation_jobs import get_job_queue
from pitchside.services.translation_store import TranslationStore
from pitchside.utils.auth import editor_required
from pitchside.utils.rate_limit import rate_limit

logger = logging.getLogger(__name__)

translate_bp = Blueprint('translate', __name__)


@translate_bp.route('/translate', methods=['POST'])
@editor_required
@rate_limit(30)
def translate_article(current_user_id):
    """Translate article fields from one language to another.

    Body: title, subtitle, summary, content, keywords, fromLanguage,
    toLanguage, and optionally articleId + saveToDb to persist the result.

    Degraded answers keep the original text, are never saved, and are
    marked with ``_translationSkipped`` (upstream out of capacity) or
    ``_error`` (upstream failure or unreadable model output).
    """
    data = request.get_json() or {}

    from_lang = normalize_language(data.get('fromLanguage'))
    to_lang = normalize_language(data.get('toLanguage'))
    if not from_lang or not to_lang:
        return jsonify({'error': 'fromLanguage and toLanguage must be supported language codes'}), 400

    source = source_fields(data)
    if not source['title'] or not source['content']:
        return jsonify({'error': 'title and content are required'}), 400

    if from_lang == to_lang:
        return jsonify(source), 200

    article_id = data.get('articleId')
    save = bool(data.get('saveToDb')) and bool(article_id)
    if save and not db.session.get(Article, article_id):
        return jsonify({'error': 'Article not found'}), 404

    try:
        result = get_translation_client().translate(source, from_lang, to_lang)
    except TranslationError as e:
        logger.error(f"Translation {from_lang}->{to_lang} failed: {e}")
        response = dict(source)
        response['_error'] = str(e)
        return jsonify(response), 200

    response = result.fields()
    if result.skipped:
        response['_translationSkipped'] = True
        return jsonify(response), 200

    if result.unparseable:
        response['_error'] = 'Unparseable model output'
        return jsonify(response), 200

    if save:
        try:
            TranslationStore().upsert(article_id, to_lang, response)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.error(f"Failed to save {to_lang} translation of article {article_id}: {e}")
            return jsonify({'error': f'Failed to save translation: {e}'}), 500

    return jsonify(response), 200


@translate_bp.route('/translate/batch', methods=['POST'])
@editor_required
@rate_limit(10)
def translate_all_languages(current_user_id):
    """Translate an article into every other supported language and persist the results."""
    data = request.get_json() or {}

    article_id = data.get('articleId')
    if not article_id:
        return jsonify({'success': False, 'error': 'articleId is required'}), 400

    original_language = normalize_language(data.get('originalLanguage'))
    if not original_language:
        return jsonify({'success': False, 'error': 'originalLanguage must be a supported language code'}), 400

    if not data.get('title') or not data.get('content'):
        return jsonify({'success': False, 'error': 'title and content are required'}), 400

    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({'success': False, 'error': 'Article not found'}), 404

    if original_language != article.original_language:
        return jsonify({
            'success': False,
            'error': f"originalLanguage does not match the article's original language ({article.original_language})"
        }), 400

    batch = get_orchestrator().translate_all_languages(
        article_id,
        data.get('title'),
        data.get('subtitle'),
        data.get('summary'),
        data.get('content'),
        data.get('keywords') or [],
        original_language,
    )
    return jsonify(batch.to_dict()), 200


@translate_bp.route('/translations/<article_id>/<language>', methods=['GET'])
def get_translation(article_id, language):
    """Persisted translation for (article, language)."""
    translation = TranslationStore().get(article_id, language)
    if translation is None:
        return jsonify({'error': 'Translation not found'}), 404
    return jsonify(translation.to_dict()), 200


@translate_bp.route('/translation-jobs/<job_id>', methods=['GET'])
@editor_required
def get_translation_job(current_user_id, job_id):
    job = get_job_queue().get(job_id)
    if job is None:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify(job), 200
