"""Open Graph / Twitter meta pages for social crawlers.

Link previews on Facebook, WhatsApp, X etc. come from crawlers that don't
run the SPA's JavaScript. For those user agents we render a static page
with the article's meta tags. The tags always use the article's
original-language fields, never a translation.
"""
import re
import logging
from datetime import datetime
from urllib.parse import urljoin

from flask import render_template

logger = logging.getLogger(__name__)

# Matched case-insensitively as substrings of the User-Agent
CRAWLER_USER_AGENTS = (
    'facebookexternalhit',
    'facebot',
    'twitterbot',
    'linkedinbot',
    'slackbot',
    'whatsapp',
    'telegrambot',
    'discordbot',
    'pinterest',
    'embedly',
    'googlebot',
    'bingbot',
)

DESCRIPTION_LENGTH = 160
DEFAULT_DESCRIPTION = 'Latest football news and updates'
DEFAULT_AUTHOR_SUFFIX = 'Team'

_WHITESPACE = re.compile(r'\s+')


def is_crawler(user_agent) -> bool:
    """Check if a User-Agent belongs to a link-preview or search crawler."""
    ua = (user_agent or '').lower()
    return any(token in ua for token in CRAWLER_USER_AGENTS)


def describe(article) -> str:
    """Summary if present, else the start of the body, else a default."""
    if article.summary:
        return article.summary
    if article.content:
        snippet = _WHITESPACE.sub(' ', article.content[:DESCRIPTION_LENGTH]).strip()
        return f'{snippet}...'
    return DEFAULT_DESCRIPTION


def build_meta(article, site_url: str, site_name: str) -> dict:
    """Collect the values the meta template needs."""
    article_url = f'{site_url}/articles/{article.id}'
    if article.thumbnail_url:
        image = urljoin(f'{site_url}/', article.thumbnail_url)
    else:
        image = f'{site_url}/og-image.png'
    published = article.published_at or datetime.utcnow()

    return {
        'language': article.original_language or 'en',
        'title': article.title or f'{site_name} - Football News',
        'description': describe(article),
        'author': article.author or f'{site_name} {DEFAULT_AUTHOR_SUFFIX}',
        'url': article_url,
        'image': image,
        'site_name': site_name,
        'published_time': published.isoformat(),
    }


def render_article_meta(article, site_url: str, site_name: str) -> str:
    """Render the crawler HTML page for an article (autoescaped by Jinja)."""
    return render_template(
        'article_meta.html',
        meta=build_meta(article, site_url, site_name)
    )
