"""
Tests for per-user rate limits on the translation endpoints.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from pitchside.utils.rate_limit import check_rate_limit, reset_rate_limits


@pytest.fixture(autouse=True)
def clean_counters():
    reset_rate_limits()
    yield
    reset_rate_limits()


class TestCheckRateLimit:

    def test_allows_up_to_limit(self, app):
        with app.app_context():
            results = [check_rate_limit('translate:user-1', 3, 60)[0] for _ in range(4)]

        assert results == [True, True, True, False]

    def test_keys_are_independent(self, app):
        with app.app_context():
            check_rate_limit('translate:user-1', 1, 60)
            allowed, _ = check_rate_limit('translate:user-2', 1, 60)

        assert allowed is True

    def test_retry_after_within_window(self, app):
        with app.app_context():
            check_rate_limit('translate:user-1', 1, 60)
            allowed, retry_after = check_rate_limit('translate:user-1', 1, 60)

        assert allowed is False
        assert 0 < retry_after <= 61

    def test_concurrent_requests_counted_exactly(self, app):
        def hit(_):
            with app.app_context():
                return check_rate_limit('translate:user-1', 25, 60)[0]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(hit, range(100)))

        assert results.count(True) == 25


class TestRateLimitedEndpoint:

    def test_batch_endpoint_returns_429(self, app, client, editor_headers, monkeypatch):
        monkeypatch.setitem(app.config, 'RATE_LIMIT_ENABLED', True)

        statuses = [
            client.post('/api/translate/batch', json={}, headers=editor_headers).status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [400] * 10
        assert statuses[10] == 429

    def test_disabled_in_testing_config(self, client, editor_headers):
        statuses = {
            client.post('/api/translate/batch', json={}, headers=editor_headers).status_code
            for _ in range(15)
        }

        assert statuses == {400}
