#!/usr/bin/env python3
"""Rerun translation batches for published articles.

By default only articles with a missing or stale translation are picked
up. Each article gets the full batch (every target language), one article
at a time.

Usage:
    python scripts/retranslate_articles.py            # missing or stale only
    python scripts/retranslate_articles.py --all      # every published article
    python scripts/retranslate_articles.py --dry-run  # just list them
"""

import argparse
import sys
import os

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pitchside import create_app
from pitchside.constants import target_languages
from pitchside.models import Article
from pitchside.services.translation_batch import get_orchestrator
from pitchside.services.translation_store import TranslationStore


def needs_translation(article, store):
    """True if any target language is missing or older than the last edit."""
    rows = {row.language: row for row in store.list_for_article(article.id)}
    for language in target_languages(article.original_language):
        row = rows.get(language)
        if row is None or row.updated_at < article.content_updated_at:
            return True
    return False


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--all', action='store_true', help='retranslate every published article')
    parser.add_argument('--dry-run', action='store_true', help='list articles without translating')
    args = parser.parse_args()

    app = create_app(os.getenv('FLASK_ENV', 'development'))

    with app.app_context():
        store = TranslationStore()
        articles = Article.query.filter_by(is_published=True).order_by(Article.published_at.desc()).all()
        pending = [a for a in articles if args.all or needs_translation(a, store)]

        print(f"\n{len(pending)} of {len(articles)} published articles to translate\n")

        if args.dry_run:
            for article in pending:
                print(f"  - {article.id}  [{article.original_language}]  {article.title}")
            return 0

        orchestrator = get_orchestrator()
        failures = 0
        for article in pending:
            batch = orchestrator.translate_article(article)
            marker = '✅' if batch.success else '⚠️'
            print(f"{marker} {article.title}: {batch.results}")
            for error in batch.errors:
                print(f"     {error}")
            if not batch.success:
                failures += 1

        print(f"\nDone. {len(pending) - failures} complete, {failures} partial/failed.")
        return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
