"""Per-user rate limits for endpoints that call the paid translation API.

Counters live in Redis when it is configured so every worker shares them;
otherwise each process keeps its own in memory.
"""

import time
import logging
import threading
from functools import wraps
from flask import jsonify, current_app

from pitchside.services.redis_client import RATE_LIMIT_PREFIX, incr_window

logger = logging.getLogger(__name__)

# In-memory fallback storage
# Format: {key: {'count': int, 'window_start': timestamp}}
_request_counts = {}
_lock = threading.Lock()


def check_rate_limit(key: str, limit: int, window_seconds: int) -> tuple:
    """Count one request against key.

    Returns:
        Tuple of (is_allowed, retry_after_seconds)
    """
    shared = incr_window(f"{RATE_LIMIT_PREFIX}{key}", window_seconds)
    if shared is not None:
        count, seconds_left = shared
        return count <= limit, (seconds_left if count > limit else 0)

    with _lock:
        current_time = time.time()
        entry = _request_counts.get(key)

        # Start a new window if none is open or the last one has expired
        if entry is None or current_time - entry['window_start'] >= window_seconds:
            entry = {'count': 0, 'window_start': current_time}
            _request_counts[key] = entry

        entry['count'] += 1
        count = entry['count']
        window_start = entry['window_start']

    if count > limit:
        retry_after = int(window_seconds - (current_time - window_start)) + 1
        return False, retry_after
    return True, 0


def reset_rate_limits():
    with _lock:
        _request_counts.clear()


def rate_limit(limit: int, window_seconds: int = 60):
    """
    Decorator: allow at most `limit` calls per user per window.

    Goes below an auth decorator, since it keys on current_user_id.
    Disabled when RATE_LIMIT_ENABLED is false.

    Usage:
        @bp.route('/translate', methods=['POST'])
        @editor_required
        @rate_limit(30)
        def translate(current_user_id):
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated(current_user_id, *args, **kwargs):
            if current_app.config.get('RATE_LIMIT_ENABLED', True):
                key = f"{f.__name__}:{current_user_id}"
                is_allowed, retry_after = check_rate_limit(key, limit, window_seconds)
                if not is_allowed:
                    logger.warning(f"Rate limit hit on {f.__name__} by user {current_user_id}")
                    response = jsonify({
                        'error': f'Too many requests. Try again in {retry_after} seconds'
                    })
                    response.headers['Retry-After'] = str(retry_after)
                    return response, 429
            return f(current_user_id, *args, **kwargs)
        return decorated
    return decorator
